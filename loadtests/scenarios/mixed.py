"""Mixed storefront workload scenario.

Combines browsing, checkout and administration with weights that model a
typical storefront: mostly reads, a steady stream of checkouts, and a little
back-office activity. This is the recommended scenario for a load baseline.
"""

from locust import HttpUser, between

from loadtests.scenarios.catalogue import MerchantJourney
from loadtests.scenarios.ordering import OrderAdminJourney, ShopperJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    - Shoppers (70%): register, browse, checkout and look up their orders
    - Merchants (20%): product lifecycle from creation to deactivation
    - Order admins (10%): status changes, analytics, stale order release
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        ShopperJourney: 7,
        MerchantJourney: 2,
        OrderAdminJourney: 1,
    }
