"""
Example: diesel heater on a real asyncio clock (stage delays shortened),
including a power-off request while the heater is still starting.
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add repository root (VanTwin) to the path
ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from vantwin.control import AsyncioScheduler, DeviceState, StageDelays, TimedDeviceController
from vantwin.logging_config import setup_logging


async def run() -> None:
    loop = asyncio.get_running_loop()
    start = loop.time()

    def report(state: DeviceState) -> None:
        print(f"  t={loop.time() - start:5.2f}s  {state.status.label:<14} mode={state.mode.value} error={state.error_code}")

    heater = TimedDeviceController(
        scheduler=AsyncioScheduler(loop),
        delays=StageDelays(starting=0.3, warming_up=0.5, shutting_down=0.5),
        on_change=report,
    )

    print("Full cycle:")
    heater.set_error("E07")
    heater.set_power(True)
    await asyncio.sleep(1.0)
    heater.set_mode("ventilation")
    heater.set_power(False)
    await asyncio.sleep(0.7)

    print("Interrupted start:")
    heater.set_power(True)
    await asyncio.sleep(0.1)
    heater.set_power(False)
    await asyncio.sleep(0.7)
    heater.close()


def main() -> None:
    setup_logging(logging.WARNING)
    asyncio.run(run())


if __name__ == "__main__":
    main()
