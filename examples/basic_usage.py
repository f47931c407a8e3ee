"""Basic usage examples for the Jolpica client and services."""

import asyncio

from jolpica import DriverService, EntityService, JolpicaClient, SessionCache, user_message
from jolpica.exceptions import JolpicaError


async def main() -> None:
    cache = SessionCache()
    async with JolpicaClient() as f1:
        # Latest race of the current season
        print("=== Latest race ===")
        race = await f1.last_results()
        if race is None:
            print("  No race run yet this season.")
        else:
            print(f"  {race.season} {race.display_name}")
            for entry in race.results[:3]:
                name = entry.driver.full_name if entry.driver else "?"
                print(f"  P{entry.position} {name} ({entry.status})")

        # Look a driver up by name, then roll up their career
        entities = EntityService(f1, cache)
        alonso = await entities.find_driver_by_name("Fernando Alonso")
        if alonso is None:
            print("  Driver not found.")
            return

        print(f"\n=== Career of {alonso.full_name} ===")
        try:
            stats = await DriverService(f1, cache).driver_career(alonso.driver_id)
        except JolpicaError as exc:
            print(f"  {user_message(exc)}")
            return
        avg = f"{stats.average_finish:.2f}" if stats.average_finish else "N/A"
        print(f"  Starts: {stats.races_started}, wins: {stats.wins}, poles: {stats.poles}")
        print(f"  Average finish: {avg}, total points: {stats.total_points:g}")
        for row in stats.constructor_breakdown:
            print(f"  {row.first_season}: {row.name} - {row.races} races, {row.wins} wins")


if __name__ == "__main__":
    asyncio.run(main())
