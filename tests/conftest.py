import httpx
import pytest
import pytest_asyncio

from shared.config.database import Database
from shared.config.settings import Settings


class FakeMenu:
    """Stands in for the menu service behind an httpx.MockTransport."""

    def __init__(self):
        self.pizzas = {}
        self.down = False
        self.requests = []

    def add(self, pizza_id, name, price, available=True):
        self.pizzas[pizza_id] = {
            "id": pizza_id,
            "name": name,
            "price": price,
            "available": available,
            "category": "Classic",
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("Connection refused", request=request)

        pizza_id = request.url.path.rsplit("/", 1)[-1]
        pizza = self.pizzas.get(pizza_id)
        if pizza is None:
            return httpx.Response(404, json={"success": False, "message": "Pizza not found"})
        return httpx.Response(200, json={"success": True, "data": dict(pizza)})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'pizzeria.db'}",
        gateway_timeout_seconds=2.0,
        catalog_timeout_seconds=2.0,
        tracing_enabled=False,
        metrics_enabled=False,
    )


@pytest.fixture
def fake_menu():
    menu = FakeMenu()
    menu.add("margherita", "Margherita", 45)
    menu.add("pepperoni", "Pepperoni", 55)
    menu.add("hawaiian", "Hawaiian", 50, available=False)
    return menu


@pytest_asyncio.fixture
async def database(settings):
    db = Database(settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session
