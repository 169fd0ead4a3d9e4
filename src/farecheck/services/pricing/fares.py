"""Platform fare deductions."""

from __future__ import annotations

from dataclasses import dataclass

from ...config import settings
from .models import FareBreakdown


@dataclass(frozen=True, slots=True)
class DeductionRates:
    commission_rate: float
    vat_rate: float
    cpf_withholding_rate: float
    platform_fee_offset: float

    @classmethod
    def from_settings(cls) -> "DeductionRates":
        return cls(
            commission_rate=settings.commission_rate,
            vat_rate=settings.vat_rate,
            cpf_withholding_rate=settings.cpf_withholding_rate,
            platform_fee_offset=settings.platform_fee_offset,
        )


class FareDeductionEngine:
    """Splits an offered fare into platform deductions and the courier's net fare.

    The offered (gross) fare already includes the platform fee offset, so
    percentage deductions apply to the base fare with the offset removed.
    Negative fares are not rejected here.
    """

    def __init__(self, rates: DeductionRates | None = None) -> None:
        self.rates = rates or DeductionRates.from_settings()

    def breakdown(self, gross_fare: float) -> FareBreakdown:
        rates = self.rates
        base_fare = gross_fare - rates.platform_fee_offset
        commission = base_fare * rates.commission_rate
        vat = base_fare * rates.vat_rate
        cpf_withholding = base_fare * rates.cpf_withholding_rate
        platform_fee = rates.platform_fee_offset

        total_deductions = commission + vat + cpf_withholding + platform_fee
        return FareBreakdown(
            gross_fare=gross_fare,
            base_fare=base_fare,
            commission=commission,
            vat=vat,
            cpf_withholding=cpf_withholding,
            platform_fee=platform_fee,
            total_deductions=total_deductions,
            net_fare=gross_fare - total_deductions,
        )
