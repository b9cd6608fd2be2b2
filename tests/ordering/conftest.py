import pytest


@pytest.fixture(scope="session")
def _ordering_domain():
    """Initialize the ordering domain once per session."""
    from ordering.domain import ordering

    ordering.init()
    return ordering


@pytest.fixture(scope="session", autouse=True)
def setup_db(_ordering_domain):
    from ordering.utils.db import drop_db, setup_db

    setup_db(_ordering_domain)

    yield

    drop_db(_ordering_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_ordering_domain):
    """Push domain context before each test, cleanup after."""
    from ordering.engine import reset_engine
    from ordering.ledger.locks import reset_locks
    from ordering.notifier import reset_notifier

    ctx = _ordering_domain.domain_context()
    ctx.push()

    yield

    reset_engine()
    reset_notifier()
    reset_locks()

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def notifier():
    from ordering.notifier import set_notifier
    from ordering.notifier.fake_adapter import FakeNotifier

    fake = FakeNotifier()
    set_notifier(fake)
    return fake


@pytest.fixture()
def engine(notifier):
    """An engine delivering to the fake notifier, installed as the process-wide engine."""
    from ordering.engine import OrderEngine, set_engine
    from ordering.notifier.dispatch import NotificationDispatcher

    order_engine = OrderEngine(
        dispatcher=NotificationDispatcher(notifier=notifier, max_workers=2),
        restore_inventory_on_cancel=True,
    )
    set_engine(order_engine)
    return order_engine


@pytest.fixture()
def seller():
    return "seller-001"


@pytest.fixture()
def buyer():
    return "buyer-001"


@pytest.fixture()
def material(engine, seller):
    """Ten kilograms of material listed by ``seller``."""
    return engine.register_material(seller_id=seller, available_quantity=10.0, unit="kg", title="Indigo denim offcuts")


@pytest.fixture()
def pending_order(engine, material, buyer):
    return engine.create_order(material.id, buyer, 2.0, 20.0, "EUR")
