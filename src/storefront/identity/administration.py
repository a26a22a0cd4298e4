"""Seller administration: commands and queries used by admins."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.account import Account, AccountRole, AccountStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Account")
class UpdateSellerStatus:
    seller_id = Identifier(required=True)
    status = String(required=True, choices=AccountStatus)


@storefront.command_handler(part_of=Account)
class SellerAdministrationHandler:
    @handle(UpdateSellerStatus)
    def update_seller_status(self, command):
        repo = current_domain.repository_for(Account)
        seller = repo.get(command.seller_id)
        if not seller.has_role(AccountRole.SELLER):
            raise ObjectNotFoundError({"_entity": "Seller not found"})

        seller.change_status(command.status)
        repo.add(seller)

        logger.info("Seller status updated", seller_id=str(seller.id), status=seller.status)
        return seller.to_profile()


def list_sellers(status: str | None = None) -> list[dict]:
    sellers = current_domain.repository_for(Account).find_by_role(AccountRole.SELLER)
    if status:
        sellers = [s for s in sellers if s.status == status]
    sellers.sort(key=lambda s: s.registered_at, reverse=True)
    return [s.to_profile() for s in sellers]


def get_profile(account_id: str) -> dict:
    return current_domain.repository_for(Account).get(account_id).to_profile()
