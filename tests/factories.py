# =============================================================================
# Payload factories (wire field names, as the front end posts them)
# =============================================================================

from datetime import date, timedelta

import factory

from tailortrack.models import GARMENTS


class OrderPayloadFactory(factory.Factory):
    class Meta:
        model = dict

    sno = factory.Sequence(lambda n: str(1000 + n))
    product = factory.Iterator(GARMENTS)
    additional = ""
    oDate = factory.LazyFunction(lambda: date.today().isoformat())
    dDate = factory.LazyFunction(lambda: (date.today() + timedelta(days=5)).isoformat())
    tel = factory.Sequence(lambda n: f"98{n:08d}")
    link = ""
    deliveryStatus = "pending"


class StaffBookPayloadFactory(factory.Factory):
    class Meta:
        model = dict

    billbookRange = factory.Sequence(lambda n: f"{n * 50 + 1}-{n * 50 + 50}")
    staffName = factory.Iterator(["Amit", "Ravi", "Suresh"])


class EntryStatusPayloadFactory(factory.Factory):
    class Meta:
        model = dict

    sno = "1000"
    product = factory.Iterator(GARMENTS)
    package = False
