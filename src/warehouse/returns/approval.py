"""Admin decisions on a pending product return."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.returns.product_return import ProductReturn
from warehouse.utils.tenancy import load_for_tenant

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="ProductReturn")
class ApproveProductReturn:
    tenant_id = Identifier(required=True)
    return_id = Identifier(required=True)
    approved_by = String(required=True, max_length=100)


@warehouse.command(part_of="ProductReturn")
class RejectProductReturn:
    tenant_id = Identifier(required=True)
    return_id = Identifier(required=True)
    rejected_by = String(required=True, max_length=100)
    reason = Text(required=True)


@warehouse.command_handler(part_of=ProductReturn)
class ProductReturnDecisionHandler:
    @handle(ApproveProductReturn)
    def approve(self, command):
        product_return = load_for_tenant(ProductReturn, command.return_id, command.tenant_id)
        product_return.approve(command.approved_by)
        current_domain.repository_for(ProductReturn).add(product_return)

        logger.info(
            "Product return approved",
            tenant_id=str(command.tenant_id),
            return_id=str(product_return.id),
            approved_by=command.approved_by,
        )

    @handle(RejectProductReturn)
    def reject(self, command):
        product_return = load_for_tenant(ProductReturn, command.return_id, command.tenant_id)
        product_return.reject(command.rejected_by, command.reason)
        current_domain.repository_for(ProductReturn).add(product_return)

        logger.info(
            "Product return cancelled",
            tenant_id=str(command.tenant_id),
            return_id=str(product_return.id),
            rejected_by=command.rejected_by,
        )
