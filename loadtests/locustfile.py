"""FabricLoop Load Testing: Locust entry point.

Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Contended material only, headless (CI mode):
    locust -f loadtests/locustfile.py ContendedMaterialBuyer --headless \
           -u 50 -r 10 -t 120s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.ordering import ContendedMaterialBuyer, OrderLifecycleUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Expected rejections (409 INSUFFICIENT_QUANTITY once a material sells out)
    are logged at debug level; everything else is an error.
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code == 409:
        logger.debug("[409] %s %s: %s", request_type, name, extract_error_detail(response))
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Check the oversell invariant on every contended material when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    for material_id, seller_id in ContendedMaterialBuyer.materials.items():
        try:
            material = requests.get(f"{environment.host}/materials/{material_id}", timeout=5).json()
            orders = requests.get(
                f"{environment.host}/transactions",
                params={"role": "seller"},
                headers={"X-User-Id": seller_id},
                timeout=5,
            ).json()
        except Exception as e:
            print(f"[LOADTEST] Could not verify material {material_id}: {e}")
            continue

        reserved = sum(order["quantity"] for order in orders if order["material_id"] == material_id)
        print(
            f"[LOADTEST] Material {material_id}: {material['available_quantity']} {material['unit']} left, "
            f"{reserved} reserved by {len(orders)} orders"
        )
    print()
