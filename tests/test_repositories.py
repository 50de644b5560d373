import json

import pytest

from hvac_ops.sheets import InvalidCredentials, RequestFailed, UnsupportedOperation
from hvac_ops.sheets.models import Customer, Payment, WorkDay
from hvac_ops.sheets.services import DeletePolicy, ReloadingCollection, photo_data_uri


def _sent(store, index=-1):
    request = store.requests[index]
    if request.method == "GET":
        return dict(request.url.params)
    return json.loads(request.content.decode("utf-8"))


class TestSheetRepositories:
    """Unit tests for per-sheet verbs"""

    @pytest.mark.asyncio
    async def test_get_all_returns_records_in_store_order(self, store, repos):
        store.seed("Customers", {"id": "2", "firstName": "Zed"}, {"id": "1", "firstName": "Amy"})

        customers = await repos.customers.get_all()

        assert [c.first_name for c in customers] == ["Zed", "Amy"]
        assert _sent(store) == {"action": "getAll", "sheet": "Customers"}

    @pytest.mark.asyncio
    async def test_get_by_project_filters_remotely(self, store, repos):
        store.seed("Payments",
                   {"id": "1", "projectId": "10", "amount": "100"},
                   {"id": "2", "projectId": "11", "amount": "50"})

        payments = await repos.payments.get_by_project("10")

        assert [p.id for p in payments] == ["1"]
        assert _sent(store) == {"action": "getByProject", "sheet": "Payments", "projectId": "10"}

    @pytest.mark.asyncio
    async def test_get_by_id_missing_record_fails(self, repos):
        with pytest.raises(RequestFailed) as exc:
            await repos.projects.get_by_id("404")
        assert exc.value.message == "Record not found"

    @pytest.mark.asyncio
    async def test_create_then_get_by_id_round_trips_every_field(self, repos):
        submitted = {
            "firstName": "Ana", "lastName": "Lopez", "email": "ana@example.com",
            "phone": "408-555-0101", "address": "1 Main St", "city": "San Jose",
            "state": "CA", "zip": "95123", "referral": "Yelp",
        }

        created = await repos.customers.create(submitted)
        fetched = await repos.customers.get_by_id(created.id)

        assert created.id
        fetched_record = fetched.to_record()
        for key, value in submitted.items():
            assert fetched_record[key] == value

    @pytest.mark.asyncio
    async def test_create_accepts_models_and_sends_wire_names(self, store, repos):
        work_day = WorkDay(project_id="3", date="2025-01-05", hours="7.5", notes="Rough-in")

        created = await repos.work_days.create(work_day)

        assert created.id == "1"
        assert created.hours == "7.5"
        assert _sent(store) == {
            "action": "create",
            "sheet": "WorkDays",
            "record": {"projectId": "3", "date": "2025-01-05", "hours": "7.5", "notes": "Rough-in"},
        }

    @pytest.mark.asyncio
    async def test_update_replaces_whole_record(self, store, repos):
        store.seed("Projects", {"id": "4", "projectName": "Old", "notes": "keep?"})

        updated = await repos.projects.update("4", {"projectName": "New", "status": "approved"})

        assert updated.id == "4"
        assert updated.project_name == "New"
        assert store.sheets["Projects"][0] == {"id": "4", "projectName": "New", "status": "approved"}
        assert _sent(store)["record"] == {"projectName": "New", "status": "approved"}

    @pytest.mark.asyncio
    async def test_delete_removes_record(self, store, repos):
        store.seed("Customers", {"id": "1"})

        assert await repos.customers.delete("1") is None

        assert store.sheets["Customers"] == []
        assert _sent(store) == {"action": "delete", "sheet": "Customers", "id": "1"}

    @pytest.mark.asyncio
    async def test_repeated_delete_surfaces_remote_decision(self, store, repos):
        store.seed("Photos", {"id": "1", "projectId": "2"})
        await repos.photos.delete("1")

        with pytest.raises(RequestFailed):
            await repos.photos.delete("1")

    @pytest.mark.asyncio
    async def test_unsupported_verbs_make_no_request(self, store, repos):
        with pytest.raises(UnsupportedOperation):
            await repos.customers.get_by_project("1")
        with pytest.raises(UnsupportedOperation):
            await repos.equipment.update("1", {"name": "x"})
        with pytest.raises(UnsupportedOperation):
            await repos.users.delete("u1")
        assert store.requests == []

    @pytest.mark.asyncio
    async def test_photo_upload_stores_data_uri(self, store, repos, tmp_path):
        image = tmp_path / "furnace.png"
        image.write_bytes(b"\x89PNG fake")

        photo = await repos.photos.upload("8", image)

        assert photo.filename == "furnace.png"
        assert photo.url == photo_data_uri(b"\x89PNG fake", "furnace.png")
        assert photo.url.startswith("data:image/png;base64,")
        assert store.sheets["Photos"][0]["projectId"] == "8"


class TestLogin:
    """Unit tests for the login call"""

    @pytest.mark.asyncio
    async def test_login_returns_user(self, store, repos):
        user = await repos.users.login("ed@edco.test", "hunter2")

        assert user.id == "u1"
        assert user.name == "Ed Owner"
        assert _sent(store)["action"] == "login"

    @pytest.mark.asyncio
    async def test_login_rejected(self, repos):
        with pytest.raises(InvalidCredentials) as exc:
            await repos.users.login("ed@edco.test", "wrong")
        assert exc.value.message == "Invalid email or password"
        assert isinstance(exc.value, RequestFailed)

    @pytest.mark.asyncio
    async def test_find_by_id_returns_full_row(self, repos):
        user = await repos.users.find_by_id("u1")
        assert user.password == "hunter2"

        with pytest.raises(RequestFailed):
            await repos.users.find_by_id("missing")


class TestProjectDeletion:
    """Unit tests for the explicit orphan/cascade policy"""

    @pytest.fixture
    def seeded(self, store):
        store.seed("Projects", {"id": "p1", "projectName": "Heat pump"})
        store.seed("Equipment", {"id": "e1", "projectId": "p1"})
        store.seed("WorkDays", {"id": "w1", "projectId": "p1"}, {"id": "w2", "projectId": "p2"})
        store.seed("Payments", {"id": "pay1", "projectId": "p1"})
        return store

    @pytest.mark.asyncio
    async def test_orphan_policy_leaves_children(self, seeded, repos):
        deleted = await repos.projects.delete_project("p1")

        assert deleted == {}
        assert seeded.sheets["Projects"] == []
        assert len(seeded.sheets["Equipment"]) == 1
        assert len(seeded.sheets["WorkDays"]) == 2

    @pytest.mark.asyncio
    async def test_cascade_policy_deletes_children(self, seeded, repos):
        deleted = await repos.projects.delete_project(
            "p1", policy=DeletePolicy.CASCADE, children=repos.project_children())

        assert deleted == {"Equipment": 1, "WorkDays": 1, "Payments": 1, "Photos": 0}
        assert seeded.sheets["Projects"] == []
        assert seeded.sheets["Equipment"] == []
        assert [w["id"] for w in seeded.sheets["WorkDays"]] == ["w2"]

    @pytest.mark.asyncio
    async def test_cascade_requires_children(self, seeded, repos):
        with pytest.raises(ValueError):
            await repos.projects.delete_project("p1", policy=DeletePolicy.CASCADE)
        assert len(seeded.sheets["Projects"]) == 1


class TestReloadingCollection:
    """Writes are followed by a full reload"""

    @pytest.mark.asyncio
    async def test_add_sets_project_and_reloads(self, store, repos):
        payments = ReloadingCollection(repos.payments, project_id="p9")
        await payments.load()
        assert payments.items == []

        items = await payments.add({"date": "2025-02-01", "amount": "250"})

        assert [p.amount for p in items] == ["250"]
        assert payments.items[0].project_id == "p9"
        assert [_sent(store, i)["action"] for i in range(len(store.requests))] == [
            "getByProject", "create", "getByProject"]

    @pytest.mark.asyncio
    async def test_add_model_and_remove(self, store, repos):
        payments = ReloadingCollection(repos.payments, project_id="p9")
        await payments.add(Payment(date="2025-02-01", amount=100))

        items = await payments.remove(payments.items[0].id)

        assert items == []
        assert store.sheets["Payments"] == []

    @pytest.mark.asyncio
    async def test_edit_on_unscoped_collection(self, store, repos):
        store.seed("Customers", {"id": "c1", "firstName": "Old"})
        customers = ReloadingCollection(repos.customers)

        items = await customers.edit("c1", Customer(first_name="New"))

        assert customers.loaded is True
        assert [c.first_name for c in items] == ["New"]
