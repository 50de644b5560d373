import json
from collections import defaultdict

import httpx
import pytest

from hvac_ops.sheets import Repositories, SheetsConfig, SheetsGateway

ENDPOINT = "https://script.example.com/macros/s/test/exec"


class FakeSheetStore:
    """In-memory stand-in for the Apps Script endpoint, served through httpx.MockTransport"""

    def __init__(self):
        self.sheets = defaultdict(list)
        self.requests = []
        self.next_id = 1
        self.sheets["Users"].append(
            {"id": "u1", "name": "Ed Owner", "email": "ed@edco.test", "password": "hunter2"}
        )

    def seed(self, sheet, *records):
        for record in records:
            self.sheets[sheet].append(dict(record))

    def _find(self, sheet, record_id):
        for record in self.sheets[sheet]:
            if str(record.get("id")) == str(record_id):
                return record
        raise KeyError("Record not found")

    def dispatch(self, params):
        action = params.get("action")
        sheet = params.get("sheet")

        if action == "login":
            for user in self.sheets["Users"]:
                if user["email"] == params.get("email") and user["password"] == params.get("password"):
                    return dict(user)
            raise KeyError("Invalid email or password")
        if action == "getAll":
            return [dict(r) for r in self.sheets[sheet]]
        if action == "getByProject":
            return [dict(r) for r in self.sheets[sheet] if str(r.get("projectId")) == params["projectId"]]
        if action == "getById":
            return dict(self._find(sheet, params["id"]))
        if action == "create":
            record = {"id": str(self.next_id), **params["record"]}
            self.next_id += 1
            self.sheets[sheet].append(record)
            return dict(record)
        if action == "update":
            existing = self._find(sheet, params["id"])
            existing.clear()
            existing.update({"id": str(params["id"]), **params["record"]})
            return dict(existing)
        if action == "delete":
            existing = self._find(sheet, params["id"])
            self.sheets[sheet].remove(existing)
            return None
        raise KeyError(f"Unknown action: {action}")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            params = dict(request.url.params)
        else:
            params = json.loads(request.content.decode("utf-8"))
        try:
            data = self.dispatch(params)
        except KeyError as e:
            return httpx.Response(200, json={"success": False, "error": e.args[0]})
        body = {"success": True}
        if data is not None:
            body["data"] = data
        return httpx.Response(200, json=body)


def make_gateway(handler, endpoint=ENDPOINT):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SheetsGateway(SheetsConfig(endpoint_url=endpoint), http_client=client)


@pytest.fixture
def store():
    return FakeSheetStore()


@pytest.fixture
def gateway(store):
    return make_gateway(store)


@pytest.fixture
def repos(gateway):
    return Repositories(gateway)


@pytest.fixture
def gateway_factory():
    """Build a gateway around an arbitrary request handler"""
    return make_gateway
