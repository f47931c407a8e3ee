"""Season results with background reconciliation, plus a pit-stop summary."""

import asyncio

from jolpica import JolpicaClient, PitStopService, Progress, SeasonService, SessionCache
from jolpica.models import ReconcileState


def show_progress(progress: Progress) -> None:
    state = progress.state.value if progress.state else "scanning"
    print(f"  [{state}] {progress.message}")


async def main() -> None:
    cache = SessionCache()
    async with JolpicaClient() as f1:
        print("=== 2021 season ===")
        seasons = SeasonService(f1, cache)
        results = await seasons.season_results(2021, listeners=[show_progress])
        if results.state is not ReconcileState.COMPLETE:
            print(f"  Incomplete ({results.state.value}); missing rounds {results.missing_rounds}")

        table = seasons.table_for(results)
        for row in table.drivers[:5]:
            print(f"  {row.position:>2} {row.driver.full_name:<22} {row.points:>5}  {' '.join(row.per_race)}")
        print(f"  Champion won {table.driver_champion_wins} of {len(table.rounds)} rounds")

        print("\n=== Pit stops 2021 ===")
        summary = await PitStopService(f1, cache).pit_stop_summary(2021, 2021, listeners=[show_progress])
        if summary.fastest:
            f = summary.fastest
            print(f"  Fastest: {f.duration_text}s by {f.driver_id} at {f.race_name}, lap {f.lap}")
        for rank in summary.ranking[:5]:
            print(f"  {rank.name}: {rank.stops} stops, avg {rank.average_seconds:.2f}s")


if __name__ == "__main__":
    asyncio.run(main())
