"""
Concurrency tests for the validation engine.

Validations run on separate threads, each with its own event loop, the
way concurrent requests reach the engine under a threaded server.
"""
import threading

from asgiref.sync import async_to_sync

from core.domain.exceptions import CapacityExceededError
from core.domain.value_objects import Capacity
from validation.application.commands.validate_license import ValidateLicenseCommand

OWNER_ID = "100000000000000001"
WORKERS = 8


def run_concurrently(handler, commands):
    barrier = threading.Barrier(len(commands))
    outcomes = [None] * len(commands)

    def _worker(index, command):
        barrier.wait()
        try:
            async_to_sync(handler.handle)(command)
            outcomes[index] = "success"
        except CapacityExceededError as e:
            outcomes[index] = e.reason.value

    threads = [
        threading.Thread(target=_worker, args=(index, command))
        for index, command in enumerate(commands)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes


def test_single_slot_admits_exactly_one_address(
    validation_handler, license_repository, make_license
):
    """Test racing validations from different IPs fill one slot once."""
    license = make_license(max_ips=Capacity.bounded(1))
    commands = [
        ValidateLicenseCommand(key=license.key, discord_id=OWNER_ID, ip=f"203.0.113.{n + 1}")
        for n in range(WORKERS)
    ]

    outcomes = run_concurrently(validation_handler, commands)

    assert outcomes.count("success") == 1
    assert outcomes.count("ip_capacity") == WORKERS - 1
    stored = async_to_sync(license_repository.find_by_key)(license.key)
    assert len(stored.allowed_ips) == 1
    assert stored.validations == 1


def test_validation_counter_loses_no_updates(
    validation_handler, license_repository, make_license
):
    """Test concurrent successful validations are all counted."""
    license = make_license(max_ips=Capacity.unlimited())
    commands = [
        ValidateLicenseCommand(key=license.key, discord_id=OWNER_ID, ip=f"203.0.113.{n + 1}")
        for n in range(WORKERS)
    ]

    outcomes = run_concurrently(validation_handler, commands)

    assert outcomes == ["success"] * WORKERS
    stored = async_to_sync(license_repository.find_by_key)(license.key)
    assert stored.validations == WORKERS
    assert len(stored.allowed_ips) == WORKERS


def test_single_slot_admits_exactly_one_hwid(
    validation_handler, license_repository, make_license, hwid_product
):
    """Test racing validations from different machines fill one HWID slot once."""
    license = make_license(
        product_id=hwid_product.id,
        max_ips=Capacity.unlimited(),
        max_hwids=Capacity.bounded(1),
    )
    commands = [
        ValidateLicenseCommand(
            key=license.key, discord_id=OWNER_ID, ip="203.0.113.1", hwid=f"HW-{n}"
        )
        for n in range(WORKERS)
    ]

    outcomes = run_concurrently(validation_handler, commands)

    assert outcomes.count("success") == 1
    assert outcomes.count("hwid_capacity") == WORKERS - 1
    stored = async_to_sync(license_repository.find_by_key)(license.key)
    winner = commands[outcomes.index("success")]
    assert stored.allowed_hwids == (winner.hwid,)
    assert stored.validations == 1
