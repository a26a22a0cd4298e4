"""Seller profile management: command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.account import Account, AccountRole
from storefront.identity.user_management import load_account
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Account")
class UpdateSellerProfile:
    seller_id = Identifier(required=True)
    store_name = String(max_length=150)
    address = Text()
    phone = String(max_length=20)
    description = Text()


@storefront.command_handler(part_of=Account)
class SellerProfileHandler:
    @handle(UpdateSellerProfile)
    def update_seller_profile(self, command):
        seller = load_account(command.seller_id, AccountRole.SELLER)

        # Blank values leave the stored ones alone
        seller.update_details(
            store_name=command.store_name or None,
            address=command.address or None,
            phone=command.phone or None,
            description=command.description or None,
        )
        current_domain.repository_for(Account).add(seller)

        logger.info("Seller profile updated", seller_id=str(seller.id))
        return seller.to_profile()
