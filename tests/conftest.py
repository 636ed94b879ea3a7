"""Shared fixtures and fakes.

``FakeElasticsearch`` implements the part of the async Elasticsearch
client the gateway uses, with response bodies shaped like the real
ones, so catalog behaviour can be tested without a cluster.
"""

import copy
from io import BytesIO
from typing import Any

import pytest
from elasticsearch import ConnectionError as ESConnectionError
from openpyxl import Workbook

from productsearch.catalog.models import Product
from productsearch.catalog.service import CatalogService
from productsearch.infrastructure.index_gateway import IndexGateway

INDEX = "products"


# ============================================================================
# Fake Elasticsearch
# ============================================================================


class FakeResponse:
    """Minimal stand-in for an elastic_transport API response."""

    def __init__(self, body: dict[str, Any], status: int = 200) -> None:
        self.body = body
        self.status = status


def _missing_index(index: str) -> FakeResponse:
    return FakeResponse(
        {
            "error": {"type": "index_not_found_exception", "reason": f"no such index [{index}]"},
            "status": 404,
        },
        status=404,
    )


def _tokens(value: Any) -> set[str]:
    return set(str(value).lower().split())


def _matches(source: dict[str, Any], query: dict[str, Any]) -> bool:
    """Evaluate the query clauses the catalog builds."""
    if "match_all" in query:
        return True
    if "match" in query:
        field, clause = next(iter(query["match"].items()))
        text = clause["query"] if isinstance(clause, dict) else clause
        return bool(_tokens(text) & _tokens(source.get(field, "")))
    if "range" in query:
        field, bounds = next(iter(query["range"].items()))
        value = source.get(field)
        if not isinstance(value, (int, float)):
            return False
        if "gte" in bounds and value < bounds["gte"]:
            return False
        if "lte" in bounds and value > bounds["lte"]:
            return False
        return True
    raise AssertionError(f"Unsupported query: {query}")


class FakeElasticsearch:
    """In-memory async Elasticsearch double.

    Attributes:
        indices: Stored documents per index.
        calls: (method, kwargs) of every call made.
        reject_ids: Ids that bulk reports as mapping failures.
        available: When False every call raises a connection error.
    """

    WRITE_METHODS = {"index", "update", "delete", "bulk"}
    DEFAULT_SIZE = 10

    def __init__(self) -> None:
        self.indices: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.options_calls: list[dict[str, Any]] = []
        self.reject_ids: set[str] = set()
        self.available = True
        self.closed = False

    @property
    def write_calls(self) -> list[tuple[str, dict[str, Any]]]:
        """Calls that write to the index."""
        return [call for call in self.calls if call[0] in self.WRITE_METHODS]

    def seed(self, *products: Product, index: str = INDEX) -> None:
        """Store products directly, bypassing the call log."""
        documents = self.indices.setdefault(index, {})
        for product in products:
            documents[product.id] = product.to_document()

    def options(self, **kwargs: Any) -> "FakeElasticsearch":
        self.options_calls.append(kwargs)
        return self

    def _record(self, method: str, **kwargs: Any) -> None:
        self.calls.append((method, kwargs))
        if not self.available:
            raise ESConnectionError("Connection refused")

    async def index(
        self, index: str, id: str, document: dict[str, Any], refresh: Any = False
    ) -> FakeResponse:
        self._record("index", index=index, id=id, document=document, refresh=refresh)
        documents = self.indices.setdefault(index, {})
        result = "updated" if id in documents else "created"
        documents[id] = copy.deepcopy(document)
        return FakeResponse(
            {"_index": index, "_id": id, "result": result},
            status=200 if result == "updated" else 201,
        )

    async def get(self, index: str, id: str) -> FakeResponse:
        self._record("get", index=index, id=id)
        if index not in self.indices:
            return _missing_index(index)
        document = self.indices[index].get(id)
        if document is None:
            return FakeResponse({"_index": index, "_id": id, "found": False}, status=404)
        return FakeResponse(
            {"_index": index, "_id": id, "found": True, "_source": copy.deepcopy(document)}
        )

    async def update(
        self,
        index: str,
        id: str,
        doc: dict[str, Any],
        doc_as_upsert: bool = False,
        source: bool = False,
        refresh: Any = False,
    ) -> FakeResponse:
        self._record(
            "update", index=index, id=id, doc=doc, doc_as_upsert=doc_as_upsert, refresh=refresh
        )
        documents = self.indices.get(index)
        existing = None if documents is None else documents.get(id)

        if existing is None and not doc_as_upsert:
            if documents is None:
                return _missing_index(index)
            return FakeResponse(
                {
                    "error": {
                        "type": "document_missing_exception",
                        "reason": f"[{id}]: document missing",
                    },
                    "status": 404,
                },
                status=404,
            )

        if existing is None:
            merged = copy.deepcopy(doc)
            result = "created"
        else:
            merged = {**existing, **doc}
            result = "noop" if merged == existing else "updated"

        self.indices.setdefault(index, {})[id] = merged
        body: dict[str, Any] = {"_index": index, "_id": id, "result": result}
        if source:
            body["get"] = {"found": True, "_source": copy.deepcopy(merged)}
        return FakeResponse(body)

    async def delete(self, index: str, id: str, refresh: Any = False) -> FakeResponse:
        self._record("delete", index=index, id=id, refresh=refresh)
        if index not in self.indices:
            return _missing_index(index)
        if self.indices[index].pop(id, None) is None:
            return FakeResponse({"_index": index, "_id": id, "result": "not_found"}, status=404)
        return FakeResponse({"_index": index, "_id": id, "result": "deleted"})

    async def search(
        self, index: str, query: dict[str, Any], size: int | None = None
    ) -> FakeResponse:
        self._record("search", index=index, query=query, size=size)
        if index not in self.indices:
            return _missing_index(index)
        hits = [
            {"_index": index, "_id": doc_id, "_score": 1.0, "_source": copy.deepcopy(doc)}
            for doc_id, doc in self.indices[index].items()
            if _matches(doc, query)
        ]
        limit = self.DEFAULT_SIZE if size is None else size
        return FakeResponse(
            {"took": 1, "hits": {"total": {"value": len(hits)}, "hits": hits[:limit]}}
        )

    async def bulk(
        self,
        operations: list[dict[str, Any]],
        wait_for_active_shards: Any = None,
        refresh: Any = False,
    ) -> FakeResponse:
        self._record(
            "bulk",
            operations=operations,
            wait_for_active_shards=wait_for_active_shards,
            refresh=refresh,
        )
        items = []
        for action, document in zip(operations[::2], operations[1::2]):
            meta = action["index"]
            doc_id = meta["_id"]
            if doc_id in self.reject_ids:
                items.append(
                    {
                        "index": {
                            "_index": meta["_index"],
                            "_id": doc_id,
                            "status": 400,
                            "error": {
                                "type": "mapper_parsing_exception",
                                "reason": "failed to parse field [price]",
                            },
                        }
                    }
                )
                continue
            documents = self.indices.setdefault(meta["_index"], {})
            result = "updated" if doc_id in documents else "created"
            documents[doc_id] = copy.deepcopy(document)
            items.append(
                {
                    "index": {
                        "_index": meta["_index"],
                        "_id": doc_id,
                        "status": 200 if result == "updated" else 201,
                        "result": result,
                    }
                }
            )
        errors = any("error" in next(iter(item.values())) for item in items)
        return FakeResponse({"took": 3, "errors": errors, "items": items})

    async def ping(self) -> bool:
        self.calls.append(("ping", {}))
        return self.available

    async def close(self) -> None:
        self.closed = True


# ============================================================================
# Spreadsheet Helpers
# ============================================================================


def make_workbook(*sheets: list[list[Any]], titles: list[str] | None = None) -> bytes:
    """Build an .xlsx workbook from rows of cell values.

    Args:
        *sheets: One list of rows per sheet.
        titles: Optional sheet titles.

    Returns:
        Workbook bytes.
    """
    workbook = Workbook()
    workbook.remove(workbook.active)
    for position, rows in enumerate(sheets):
        title = titles[position] if titles else f"Sheet{position + 1}"
        sheet = workbook.create_sheet(title=title)
        for row in rows:
            sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    """Create an empty fake Elasticsearch client."""
    return FakeElasticsearch()


@pytest.fixture
def gateway(fake_es: FakeElasticsearch) -> IndexGateway:
    """Create a gateway on the fake client."""
    return IndexGateway(fake_es, request_timeout=2.0)


@pytest.fixture
def service(gateway: IndexGateway) -> CatalogService:
    """Create a catalog service on the fake client."""
    return CatalogService(gateway, collection=INDEX)


@pytest.fixture
def sample_products() -> list[Product]:
    """Products spanning several categories and prices."""
    return [
        Product(id="p1", name="Widget", description="Small widget", price=9.99, category="tools"),
        Product(id="p2", name="Hammer", description="Claw hammer", price=15.0, category="tools"),
        Product(id="p3", name="Lamp", description="Desk lamp", price=5.0, category="home"),
        Product(id="p4", name="Rug", description="Wool rug", price=120.0, category="home"),
        Product(id="p5", name="Sticker", description="Free sticker", price=0.0, category="gifts"),
        Product(id="p6", name="Mug", description="Coffee mug", price=10.0, category="kitchen"),
    ]
