"""Shipment request submission: command and handler."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.shipment.request import Dimensions, ShipmentRequest


@warehouse.command(part_of="ShipmentRequest")
class SubmitShipmentRequest:
    tenant_id = Identifier(required=True)
    lines = Text(required=True)  # JSON list of line dicts
    product_type = String(max_length=50)
    shipment_type = String(max_length=50)
    service = String(max_length=50)
    pallet_sub_type = String(max_length=50)
    custom_dimensions = Text()  # JSON dict
    label_url = String(max_length=500)
    remarks = Text()


@warehouse.command_handler(part_of=ShipmentRequest)
class SubmitShipmentRequestHandler:
    @handle(SubmitShipmentRequest)
    def submit(self, command):
        lines_data = json.loads(command.lines) if isinstance(command.lines, str) else command.lines
        dimensions = None
        if command.custom_dimensions:
            dimensions = Dimensions(**json.loads(command.custom_dimensions))

        request = ShipmentRequest.submit(
            tenant_id=command.tenant_id,
            lines_data=lines_data,
            product_type=command.product_type,
            shipment_type=command.shipment_type,
            service=command.service,
            pallet_sub_type=command.pallet_sub_type,
            custom_dimensions=dimensions,
            label_url=command.label_url,
            remarks=command.remarks,
        )
        current_domain.repository_for(ShipmentRequest).add(request)
        return str(request.id)
