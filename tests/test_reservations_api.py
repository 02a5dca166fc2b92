"""API tests for the booking flow"""

import asyncio

import pytest
from httpx import AsyncClient

from app.engine import occupation_period, periods_overlap
from app.schemas.reservation import ReservationResponse
from tests.conftest import SUNDAY, TUESDAY


def _booking(shift, party_size=2, slot_time="12:30", day=TUESDAY, phone="+5511999990000"):
    return {
        "date": day,
        "shift_id": str(shift.id),
        "slot_time": slot_time,
        "party_size": party_size,
        "customer": {"full_name": "Maria Silva", "phone_whatsapp": phone},
    }


def _url(restaurant, path=""):
    return f"/restaurants/{restaurant.id}/reservations{path}"


async def _assert_no_shared_tables(client, restaurant):
    """No two live reservations hold one table during overlapping windows"""
    items = (await client.get(_url(restaurant), params={"date": TUESDAY})).json()["items"]
    live = [ReservationResponse(**item) for item in items if item["status"] in ("PENDING", "CONFIRMED")]

    for index, first in enumerate(live):
        for second in live[index + 1:]:
            if set(first.table_ids) & set(second.table_ids):
                assert not periods_overlap(
                    occupation_period(first.slot_time, 90, 10),
                    occupation_period(second.slot_time, 90, 10),
                )


@pytest.mark.asyncio
async def test_create_reservation(client: AsyncClient, test_restaurant, test_shift, test_tables):
    """Smallest fitting table is assigned and the hold window returned"""
    response = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=3))

    assert response.status_code == 201
    data = response.json()
    assert data["table_names"] == ["Mesa 2"]
    assert data["occupation_period"] == {"start": 740, "end": 850, "slot_minutes": 750}

    reservation = data["reservation"]
    assert reservation["table_id"] == str(test_tables[1].id)
    assert reservation["linked_tables"] == []
    assert reservation["status"] == "PENDING"
    assert len(reservation["reservation_code"]) == 8


@pytest.mark.asyncio
async def test_tables_run_out(client: AsyncClient, test_restaurant, test_shift, test_tables):
    """Joined tables are recorded, and a full slot is refused with a code"""
    first = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    assert first.json()["table_names"] == ["Mesa 3"]

    joined = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    assert joined.status_code == 201
    assert joined.json()["table_names"] == ["Mesa 1", "Mesa 2"]
    assert set(joined.json()["reservation"]["linked_tables"]) == {str(test_tables[0].id), str(test_tables[1].id)}

    refused = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=2))
    assert refused.status_code == 409
    assert refused.json()["detail"]["code"] == "NO_TABLES_AVAILABLE"
    assert "fila de espera" in refused.json()["detail"]["message"]

    # a later slot clear of the 12:20-14:10 hold is still bookable
    later = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=2, slot_time="14:30"))
    assert later.status_code == 201


@pytest.mark.asyncio
async def test_closed_day_is_refused(client: AsyncClient, test_restaurant, test_shift, test_tables):
    response = await client.post(_url(test_restaurant), json=_booking(test_shift, day=SUNDAY))

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "CLOSED_ON_THIS_DAY"


@pytest.mark.asyncio
async def test_malformed_input(client: AsyncClient, test_restaurant, test_shift, test_tables):
    bad_date = await client.post(_url(test_restaurant), json=_booking(test_shift, day="01/01/2030"))
    assert bad_date.status_code == 400

    bad_time = await client.post(_url(test_restaurant), json=_booking(test_shift, slot_time="12h30"))
    assert bad_time.status_code == 422

    bad_query = await client.get(
        _url(test_restaurant, "/availability"),
        params={"date": "tomorrow", "shift_id": str(test_shift.id), "party_size": 2},
    )
    assert bad_query.status_code == 400


@pytest.mark.asyncio
async def test_availability(client: AsyncClient, test_restaurant, test_shift, test_tables):
    await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))

    response = await client.get(
        _url(test_restaurant, "/availability"),
        params={"date": TUESDAY, "shift_id": str(test_shift.id), "party_size": 6},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is True
    # 2 + 4 seats can still be joined while the 6-seat table is held
    assert all(slot["tables_count"] in (1, 2) for slot in data["slots"])
    assert data["slots"][0]["time"] == "12:00"


@pytest.mark.asyncio
async def test_availability_party_too_large(client: AsyncClient, test_restaurant, test_shift, test_tables):
    response = await client.get(
        _url(test_restaurant, "/availability"),
        params={"date": TUESDAY, "shift_id": str(test_shift.id), "party_size": 13},
    )

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "PARTY_SIZE_EXCEEDS_LIMIT"


@pytest.mark.asyncio
async def test_party_size_change_reallocates(client: AsyncClient, test_restaurant, test_shift, test_tables):
    created = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=2))
    reservation_id = created.json()["reservation"]["id"]

    response = await client.put(_url(test_restaurant, f"/{reservation_id}/party-size"), json={"party_size": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["plan"]["needs_reallocation"] is True
    assert [table["name"] for table in data["plan"]["tables"]] == ["Mesa 3"]
    assert data["reservation"]["party_size"] == 5
    assert data["reservation"]["table_id"] == str(test_tables[2].id)
    assert "alterada" in data["reservation"]["tags"]
    assert "Quantidade de pessoas alterada de 2 para 5" in data["reservation"]["modification_log"][-1]["changes"]


@pytest.mark.asyncio
async def test_party_size_change_refused_when_full(client: AsyncClient, test_restaurant, test_shift, test_tables):
    created = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=2))
    await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    reservation_id = created.json()["reservation"]["id"]

    response = await client.put(_url(test_restaurant, f"/{reservation_id}/party-size"), json={"party_size": 8})

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "INSUFFICIENT_CAPACITY"


@pytest.mark.asyncio
async def test_cancel_releases_tables(client: AsyncClient, test_restaurant, test_shift, test_tables):
    created = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    reservation_id = created.json()["reservation"]["id"]

    response = await client.post(_url(test_restaurant, f"/{reservation_id}/cancel"), json={"reason": "Chuva"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "CANCELLED"
    assert "cancelada" in data["tags"]
    assert data["cancelled_at"] is not None
    assert "Motivo: Chuva" in data["notes"]

    again = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    assert again.json()["table_names"] == ["Mesa 3"]


@pytest.mark.asyncio
async def test_cancelled_reservation_cannot_change_size(client: AsyncClient, test_restaurant, test_shift, test_tables):
    created = await client.post(_url(test_restaurant), json=_booking(test_shift))
    reservation_id = created.json()["reservation"]["id"]
    await client.post(_url(test_restaurant, f"/{reservation_id}/cancel"), json={})

    response = await client.put(_url(test_restaurant, f"/{reservation_id}/party-size"), json={"party_size": 4})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_lookup_by_code_and_phone(client: AsyncClient, test_restaurant, test_shift, test_tables):
    created = await client.post(_url(test_restaurant), json=_booking(test_shift, phone="+5511988887777"))
    reservation = created.json()["reservation"]

    by_code = await client.get(_url(test_restaurant, f"/code/{reservation['reservation_code'].lower()}"))
    assert by_code.status_code == 200
    assert by_code.json()["id"] == reservation["id"]

    by_phone = await client.get(_url(test_restaurant, "/by-phone/+5511988887777"))
    assert [item["id"] for item in by_phone.json()] == [reservation["id"]]

    missing = await client.get(_url(test_restaurant, "/code/NOPE0000"))
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_status_update_is_audited(client: AsyncClient, test_restaurant, test_shift, test_tables):
    created = await client.post(_url(test_restaurant), json=_booking(test_shift))
    reservation_id = created.json()["reservation"]["id"]

    response = await client.put(_url(test_restaurant, f"/{reservation_id}"), json={"status": "confirmed"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "CONFIRMED"
    assert data["modification_log"][-1]["changes"] == "Status alterado de PENDING para CONFIRMED"


@pytest.mark.asyncio
async def test_list_and_delete(client: AsyncClient, test_restaurant, test_shift, test_tables):
    created = await client.post(_url(test_restaurant), json=_booking(test_shift))
    reservation_id = created.json()["reservation"]["id"]

    listed = await client.get(_url(test_restaurant), params={"date": TUESDAY, "status": "pending"})
    assert listed.json()["total"] == 1

    deleted = await client.delete(_url(test_restaurant, f"/{reservation_id}"))
    assert deleted.status_code == 204

    missing = await client.get(_url(test_restaurant, f"/{reservation_id}"))
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_simultaneous_bookings_for_the_last_tables(client: AsyncClient, test_restaurant, test_shift, test_tables):
    """Two parties of 7 need every table; only one can win"""
    responses = await asyncio.gather(
        client.post(_url(test_restaurant), json=_booking(test_shift, party_size=7, phone="+5511900000001")),
        client.post(_url(test_restaurant), json=_booking(test_shift, party_size=7, phone="+5511900000002")),
    )

    assert sorted(response.status_code for response in responses) == [201, 409]
    refused = next(response for response in responses if response.status_code == 409)
    assert refused.json()["detail"]["code"] == "NO_TABLES_AVAILABLE"

    await _assert_no_shared_tables(client, test_restaurant)


@pytest.mark.asyncio
async def test_no_shared_tables_after_reallocation(client: AsyncClient, test_restaurant, test_shift, test_tables):
    small = (await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=2))).json()["reservation"]
    medium = (await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=4))).json()["reservation"]

    grown = await client.put(_url(test_restaurant, f"/{small['id']}/party-size"), json={"party_size": 6})
    assert grown.json()["reservation"]["table_id"] == str(test_tables[2].id)
    await _assert_no_shared_tables(client, test_restaurant)

    refused = await client.put(_url(test_restaurant, f"/{medium['id']}/party-size"), json={"party_size": 8})
    assert refused.status_code == 409
    await _assert_no_shared_tables(client, test_restaurant)

    # the 2-seat table freed by the first move is bookable again
    extra = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=2))
    assert extra.json()["table_names"] == ["Mesa 1"]
    await _assert_no_shared_tables(client, test_restaurant)


@pytest.mark.asyncio
async def test_reinstating_keeps_free_table(client: AsyncClient, test_restaurant, test_shift, test_tables):
    created = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    reservation_id = created.json()["reservation"]["id"]
    await client.post(_url(test_restaurant, f"/{reservation_id}/cancel"), json={})

    response = await client.put(_url(test_restaurant, f"/{reservation_id}"), json={"status": "pending"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "PENDING"
    assert data["table_id"] == str(test_tables[2].id)
    assert data["modification_log"][-1]["changes"] == "Status alterado de CANCELLED para PENDING"


@pytest.mark.asyncio
async def test_reinstating_moves_off_a_rebooked_table(client: AsyncClient, test_restaurant, test_shift, test_tables):
    first = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    first_id = first.json()["reservation"]["id"]
    await client.post(_url(test_restaurant, f"/{first_id}/cancel"), json={})

    second = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    assert second.json()["table_names"] == ["Mesa 3"]

    response = await client.put(_url(test_restaurant, f"/{first_id}"), json={"status": "CONFIRMED"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "CONFIRMED"
    assert set(data["linked_tables"]) == {str(test_tables[0].id), str(test_tables[1].id)}
    assert "Mesas realocadas: Mesa 1, Mesa 2" in data["modification_log"][-1]["changes"]
    await _assert_no_shared_tables(client, test_restaurant)


@pytest.mark.asyncio
async def test_reinstating_refused_when_slot_is_full(client: AsyncClient, test_restaurant, test_shift, test_tables):
    first = await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    first_id = first.json()["reservation"]["id"]
    await client.post(_url(test_restaurant, f"/{first_id}/cancel"), json={})

    await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))
    await client.post(_url(test_restaurant), json=_booking(test_shift, party_size=6))

    response = await client.put(_url(test_restaurant, f"/{first_id}"), json={"status": "CONFIRMED"})

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "NO_TABLES_AVAILABLE"

    unchanged = await client.get(_url(test_restaurant, f"/{first_id}"))
    assert unchanged.json()["status"] == "CANCELLED"
    await _assert_no_shared_tables(client, test_restaurant)


@pytest.mark.asyncio
async def test_new_reservation_status_must_hold_tables(client: AsyncClient, test_restaurant, test_shift, test_tables):
    for status in ("CANCELLED", "completed", "NO_SHOW"):
        refused = await client.post(_url(test_restaurant), json={**_booking(test_shift), "status": status})
        assert refused.status_code == 422

    confirmed = await client.post(_url(test_restaurant), json={**_booking(test_shift), "status": "confirmed"})
    assert confirmed.status_code == 201
    assert confirmed.json()["reservation"]["status"] == "CONFIRMED"
