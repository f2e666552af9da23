"""Products API test cases (demo deployment)."""
import pytest
from httpx import AsyncClient
from apps.products.models import Product

BASE = "/api/products"


class TestProductCreate:
    """Test POST /api/products."""

    @pytest.mark.asyncio
    async def test_create_returns_201_with_record(self, client: AsyncClient):
        """Created record gets a store id and initial version."""
        response = await client.post(BASE, json={"name": "Tofu", "unitPrice": 23.25})

        assert response.status_code == 201
        product = response.json()
        assert set(product) == {"id", "name", "unitPrice", "rowVersion"}
        assert isinstance(product["id"], int)
        assert product["name"] == "Tofu"
        assert product["unitPrice"] == 23.25
        assert product["rowVersion"] == 1
        assert response.headers["location"].endswith(f"{BASE}/{product['id']}")

    @pytest.mark.asyncio
    async def test_create_then_get_yields_equal_record(self, client: AsyncClient):
        """Fetching by the returned id yields the created record."""
        created = (await client.post(BASE, json={"name": "Ikura", "unitPrice": 31})).json()

        response = await client.get(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_create_ignores_client_id(self, client: AsyncClient, sample_product: Product):
        """Ids are assigned by the store, not the caller."""
        response = await client.post(
            BASE, json={"id": sample_product.id, "name": "Konbu", "unitPrice": 6}
        )

        assert response.status_code == 201
        assert response.json()["id"] != sample_product.id

    @pytest.mark.asyncio
    async def test_create_accepts_snake_case(self, client: AsyncClient):
        response = await client.post(BASE, json={"name": "Pavlova", "unit_price": 17.45})

        assert response.status_code == 201
        assert response.json()["unitPrice"] == 17.45

    @pytest.mark.asyncio
    async def test_create_rejects_sub_cent_price(self, client: AsyncClient):
        """Prices carry at most two decimal places."""
        response = await client.post(BASE, json={"name": "Mishi Kobe Niku", "unitPrice": 97.005})

        assert response.status_code == 422
        assert (await client.get(BASE)).json() == []

    @pytest.mark.asyncio
    async def test_create_missing_name(self, client: AsyncClient):
        """Invalid body is rejected by validation."""
        response = await client.post(BASE, json={"unitPrice": 1})

        assert response.status_code == 422
        data = response.json()
        assert data["code"] == 422
        assert data["message"] == "Invalid request parameters"


class TestProductGet:
    """Test GET /api/products and GET /api/products/{id}."""

    @pytest.mark.asyncio
    async def test_get_existing(self, client: AsyncClient, sample_product: Product):
        response = await client.get(f"{BASE}/{sample_product.id}")

        assert response.status_code == 200
        product = response.json()
        assert product == {
            "id": sample_product.id,
            "name": "Widget",
            "unitPrice": 9.5,
            "rowVersion": 1,
        }

    @pytest.mark.asyncio
    async def test_get_missing_returns_404(self, client: AsyncClient):
        response = await client.get(f"{BASE}/999")

        assert response.status_code == 404
        data = response.json()
        assert data["code"] == 404
        assert "999" in data["message"]

    @pytest.mark.asyncio
    async def test_list_includes_all_inserted(self, client: AsyncClient):
        """Listing after N inserts returns at least those N."""
        names = ["Aniseed Syrup", "Chef Anton's Gumbo Mix", "Grandma's Boysenberry Spread"]
        ids = set()
        for i, name in enumerate(names):
            response = await client.post(BASE, json={"name": name, "unitPrice": 10 + i})
            ids.add(response.json()["id"])

        response = await client.get(BASE)

        assert response.status_code == 200
        listed = response.json()
        assert len(listed) >= len(names)
        assert ids <= {p["id"] for p in listed}
        assert set(names) <= {p["name"] for p in listed}

    @pytest.mark.asyncio
    async def test_list_empty(self, client: AsyncClient):
        response = await client.get(BASE)

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_trace_id_header(self, client: AsyncClient):
        """Logging middleware echoes the caller's trace id."""
        response = await client.get(BASE, headers={"X-Trace-ID": "trace-123"})

        assert response.headers["X-Trace-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_deployment_header(self, client: AsyncClient):
        response = await client.get(BASE)

        assert response.headers["X-Deployment"] == "demo"
        assert len(response.headers["X-Trace-ID"]) == 32


class TestProductUpdate:
    """Test PUT /api/products/{id}."""

    @pytest.mark.asyncio
    async def test_update_replaces_record(self, client: AsyncClient, sample_product: Product):
        payload = {"id": sample_product.id, "name": "Gadget", "unitPrice": 12, "rowVersion": 1}

        response = await client.put(f"{BASE}/{sample_product.id}", json=payload)

        assert response.status_code == 200
        updated = response.json()
        assert updated["name"] == "Gadget"
        assert updated["unitPrice"] == 12
        assert updated["rowVersion"] == 2

        fetched = (await client.get(f"{BASE}/{sample_product.id}")).json()
        assert fetched == updated

    @pytest.mark.asyncio
    async def test_update_without_version_uses_stored_one(
        self, client: AsyncClient, sample_product: Product
    ):
        payload = {"id": sample_product.id, "name": "Gizmo", "unitPrice": 3}

        response = await client.put(f"{BASE}/{sample_product.id}", json=payload)

        assert response.status_code == 200
        assert response.json()["rowVersion"] == 2

    @pytest.mark.asyncio
    async def test_update_id_mismatch_returns_400(
        self, client: AsyncClient, sample_product: Product
    ):
        """Mismatched path/body ids never touch the store."""
        payload = {"id": sample_product.id + 1, "name": "Changed", "unitPrice": 1}

        response = await client.put(f"{BASE}/{sample_product.id}", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == 400
        fetched = (await client.get(f"{BASE}/{sample_product.id}")).json()
        assert fetched["name"] == "Widget"
        assert fetched["rowVersion"] == 1

    @pytest.mark.asyncio
    async def test_update_missing_body_id_returns_400(
        self, client: AsyncClient, sample_product: Product
    ):
        response = await client.put(
            f"{BASE}/{sample_product.id}", json={"name": "Changed", "unitPrice": 1}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_nonexistent_returns_404(self, client: AsyncClient, sample_product: Product):
        """Updating an unknown id reports 404 and leaves the store untouched."""
        response = await client.put(
            f"{BASE}/999", json={"id": 999, "name": "Ghost", "unitPrice": 1}
        )

        assert response.status_code == 404
        listed = (await client.get(BASE)).json()
        assert [p["id"] for p in listed] == [sample_product.id]
        assert listed[0]["name"] == "Widget"

    @pytest.mark.asyncio
    async def test_update_nonexistent_with_version_returns_404(self, client: AsyncClient):
        response = await client.put(
            f"{BASE}/999", json={"id": 999, "name": "Ghost", "unitPrice": 1, "rowVersion": 1}
        )

        assert response.status_code == 404
        assert response.json()["code"] == 404
        assert (await client.get(BASE)).json() == []

    @pytest.mark.asyncio
    async def test_update_stale_version_is_server_error(
        self, client: AsyncClient, sample_product: Product
    ):
        """A conflicting version on an existing row surfaces as a server error."""
        url = f"{BASE}/{sample_product.id}"
        first = await client.put(
            url, json={"id": sample_product.id, "name": "First", "unitPrice": 1, "rowVersion": 1}
        )
        assert first.status_code == 200

        second = await client.put(
            url, json={"id": sample_product.id, "name": "Second", "unitPrice": 2, "rowVersion": 1}
        )

        assert second.status_code == 500
        assert "Concurrency conflict" in second.json()["message"]
        fetched = (await client.get(url)).json()
        assert fetched["name"] == "First"
        assert fetched["rowVersion"] == 2


class TestProductDelete:
    """Test DELETE /api/products/{id}."""

    @pytest.mark.asyncio
    async def test_delete_then_get_returns_404(self, client: AsyncClient, sample_product: Product):
        response = await client.delete(f"{BASE}/{sample_product.id}")

        assert response.status_code == 204
        assert response.content == b""
        response = await client.get(f"{BASE}/{sample_product.id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_returns_404(self, client: AsyncClient):
        response = await client.delete(f"{BASE}/999")

        assert response.status_code == 404
        assert response.json()["code"] == 404

    @pytest.mark.asyncio
    async def test_delete_twice(self, client: AsyncClient, sample_product: Product):
        assert (await client.delete(f"{BASE}/{sample_product.id}")).status_code == 204
        assert (await client.delete(f"{BASE}/{sample_product.id}")).status_code == 404
