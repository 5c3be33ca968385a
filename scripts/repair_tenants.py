"""
Complete provisioning of tenants whose signup failed part way

Re-runs database creation, schema registration and admin seeding for every
live tenant record that is not marked provisioned. Safe to run repeatedly.

    python -m scripts.repair_tenants
"""

import asyncio
import sys

import structlog

from netcafe.core.config import get_settings
from netcafe.core.exceptions import ProvisioningIncomplete
from netcafe.tenancy.runtime import TenancyRuntime

logger = structlog.get_logger(__name__)


async def repair_unprovisioned(runtime: TenancyRuntime) -> dict:
    """Repair every unprovisioned record; returns counts"""
    records = await runtime.directory.list_unprovisioned()
    if not records:
        logger.info("No unprovisioned tenants found")
        return {"processed": 0, "repaired": 0, "failed": 0}

    repaired = 0
    failed = 0
    for record in records:
        try:
            await runtime.provisioner.repair(record.tenant_id)
            repaired += 1
            logger.info(f"Repaired tenant {record.tenant_id} ({record.database_name})")
        except ProvisioningIncomplete as e:
            failed += 1
            logger.error(f"Failed to repair tenant {record.tenant_id} at stage {e.stage}")

    return {"processed": len(records), "repaired": repaired, "failed": failed}


async def main() -> int:
    runtime = TenancyRuntime(get_settings())
    try:
        result = await repair_unprovisioned(runtime)
    finally:
        await runtime.aclose()
    logger.info("Repair finished", **result)
    return 1 if result["failed"] else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
