"""Unit tests for the space and vehicle registries and lot administration."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from parqueo.models.access_attempt import AccessAttempt
from parqueo.models.parking_space import ParkingSpace
from parqueo.models.user import User
from parqueo.models.vehicle import Vehicle
from parqueo.services import lot_service, space_registry, vehicle_registry
from parqueo.services.admission_service import AdmissionRequest, admit_vehicle
from parqueo.services.errors import AdmissionRejected, ReasonCode, RegistryError
from parqueo.services.scope import CallerScope


class TestSpaceRegistry:
    def test_occupy_and_vacate_are_conditional(self, db, make_lot, make_space):
        space = make_space(make_lot(), "A01")

        assert space_registry.occupy(db, space.id) is True
        assert space_registry.occupy(db, space.id) is False
        assert space_registry.vacate(db, space.id) is True
        assert space_registry.vacate(db, space.id) is False

    def test_free_spaces_filtered_and_ordered(self, db, make_lot, make_space):
        main, aires = make_lot("Main"), make_lot("Aires")
        make_space(main, "C03", "CAR")
        make_space(main, "C01", "CAR", occupied=True)
        make_space(main, "C02", "CAR")
        make_space(main, "M01", "MOTORCYCLE")
        make_space(aires, "C00", "CAR")

        numbers = [s.space_number for s in space_registry.find_free_spaces(db, {"CAR"}, main.id)]

        assert numbers == ["C02", "C03"]

    def test_unscoped_search_spans_lots(self, db, make_lot, make_space):
        main, aires = make_lot("Main"), make_lot("Aires")
        make_space(main, "C02", "CAR")
        first = make_space(aires, "C01", "CAR")

        assert space_registry.first_free_space(db, {"CAR"}).id == first.id

    def test_space_number_unique_within_lot(self, db, make_lot):
        main, aires = make_lot("Main"), make_lot("Aires")
        space_registry.create_space(db, main.id, "a01", "CAR")
        other = space_registry.create_space(db, aires.id, "A01", "HANDICAP")

        with pytest.raises(RegistryError) as exc:
            space_registry.create_space(db, main.id, "A01", "CAR")

        assert exc.value.code == ReasonCode.DUPLICATE_SPACE_NUMBER
        assert other.space_type == "HANDICAP"

    def test_create_space_in_missing_lot(self, db):
        with pytest.raises(RegistryError) as exc:
            space_registry.create_space(db, 77, "A01")
        assert exc.value.code == ReasonCode.LOT_NOT_FOUND

    def test_space_cannot_move_lots(self, db, make_lot, make_space):
        main, aires = make_lot("Main"), make_lot("Aires")
        space = make_space(main, "A01")

        with pytest.raises(ValueError):
            space.parking_id = aires.id

    def test_available_spaces_by_type(self, db, make_lot, make_space):
        lot = make_lot()
        make_space(lot, "A01", "CAR")
        make_space(lot, "H01", "HANDICAP")

        handicap = space_registry.list_available_spaces(db, lot.id, "HANDICAP")

        assert [s.space_number for s in handicap] == ["H01"]


class TestVehicleRegistry:
    def test_register_uppercases_plate(self, db, make_user):
        owner = make_user()
        vehicle = vehicle_registry.register_vehicle(db, "abc-123", owner.id, "MOTORCYCLE")

        assert vehicle.license_plate == "ABC-123"
        assert vehicle_registry.find_vehicle_by_plate(db, "abc-123").id == vehicle.id

    def test_owner_vehicle_cap(self, db, make_user):
        owner = make_user()
        vehicle_registry.register_vehicle(db, "ONE111", owner.id)
        vehicle_registry.register_vehicle(db, "TWO222", owner.id)

        with pytest.raises(RegistryError) as exc:
            vehicle_registry.register_vehicle(db, "THR333", owner.id)

        assert exc.value.code == ReasonCode.VEHICLE_LIMIT_REACHED

    def test_duplicate_plate(self, db, make_user):
        vehicle_registry.register_vehicle(db, "ABC123", make_user().id)

        with pytest.raises(RegistryError) as exc:
            vehicle_registry.register_vehicle(db, "abc123", make_user().id)

        assert exc.value.code == ReasonCode.DUPLICATE_PLATE

    def test_walk_in_race_on_plate(self, db, make_vehicle):
        make_vehicle("XYZ999", owner=None, has_entered_once=True)

        with pytest.raises(AdmissionRejected) as exc:
            vehicle_registry.create_unregistered_vehicle(db, "xyz999")
        db.rollback()

        assert exc.value.code == ReasonCode.DUPLICATE_PLATE
        assert db.query(Vehicle).count() == 1

    def test_walk_in_defaults(self):
        vehicle = vehicle_registry.new_walk_in("xyz999")

        assert vehicle.license_plate == "XYZ999"
        assert vehicle.type == "CAR"
        assert vehicle.requires_handicap_space is False
        assert vehicle.owner_id is None
        assert vehicle.entry_pass_spent is True


class TestLotService:
    def test_counts(self, db, make_lot, make_space):
        main = make_lot("Main")
        make_lot("Aires")
        make_space(main, "A01", occupied=True)
        make_space(main, "A02")

        summary = {row["name"]: row for row in lot_service.list_lots_with_counts(db)}

        assert summary["Main"]["total_spaces"] == 2
        assert summary["Main"]["occupied_spaces"] == 1
        assert summary["Main"]["available_spaces"] == 1
        assert summary["Aires"]["total_spaces"] == 0

    def test_lot_with_spaces_cannot_be_deleted(self, db, make_lot, make_space):
        lot = make_lot("Main")
        make_space(lot, "A01")

        with pytest.raises(RegistryError) as exc:
            lot_service.delete_lot(db, lot.id)

        assert exc.value.code == ReasonCode.LOT_NOT_EMPTY

    def test_empty_lot_deleted(self, db, make_lot):
        lot = make_lot("Empty")
        lot_id = lot.id

        lot_service.delete_lot(db, lot_id)

        assert lot_service.find_lot(db, lot_id) is None

    def test_duplicate_lot_name(self, db, make_lot):
        make_lot("Main")
        with pytest.raises(RegistryError) as exc:
            lot_service.create_lot(db, "Main")
        assert exc.value.code == ReasonCode.DUPLICATE_LOT_NAME

    @pytest.mark.asyncio
    async def test_empty_lot_with_attempt_history_deleted(self, db, make_lot, make_user):
        lot_id = make_lot("Empty").id
        officer_id = make_user("SECURITY_OFFICER", parking_id=lot_id).id
        scope = CallerScope(user_id=officer_id, role="SECURITY_OFFICER", parking_id=lot_id)
        with pytest.raises(AdmissionRejected) as exc:
            await admit_vehicle(db, AdmissionRequest(license_plate="XYZ999"), scope)
        assert exc.value.code == ReasonCode.NO_AVAILABLE_SPACES

        lot_service.delete_lot(db, lot_id)

        db.expire_all()
        attempt = db.query(AccessAttempt).one()
        assert lot_service.find_lot(db, lot_id) is None
        assert attempt.parking_id is None
        assert attempt.failure_reason == "NO_AVAILABLE_SPACES"
        assert attempt.security_officer_id == officer_id
        assert db.query(User).filter(User.id == officer_id).one().parking_id is None
