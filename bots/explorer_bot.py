"""Reference bot that walks a tower via the REST API.

Imports a tower record, then repeatedly steps toward a neighbouring cell
the server reports as reachable:
  - Prefer cells holding a key, an item, a door or an enemy.
  - Otherwise pick a reachable cell that was visited the least.
  - Stop when nothing around is reachable or after a fixed number of steps.

Usage:
    1. Start the server:  uvicorn main:app --reload
    2. Run this bot:      python bots/explorer_bot.py path/to/tower.json
"""

import json
import sys

import httpx

BASE_URL = "http://127.0.0.1:8000"
MAX_STEPS = 500

DIRECTIONS = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}
INTERESTING = {"key", "item", "door", "enemy", "staircase"}


def _load_tower(client: httpx.Client, path: str) -> None:
    """Import a tower record and print any warnings."""
    with open(path) as f:
        record = json.load(f)
    resp = client.post("/tower/import", json=record)
    if resp.status_code == 422:
        print("Tower rejected:")
        for error in resp.json()["detail"]["errors"]:
            print(f"  - {error}")
        sys.exit(1)
    resp.raise_for_status()
    result = resp.json()
    print(f"Loaded {result['name']}: {result['standard_rooms']} room(s), {result['enemies']} enemies")
    for warning in result["errors"]:
        print(f"  warning: {warning}")


def _choose_direction(state: dict, reachable: list[list[bool]], visits: dict) -> str | None:
    """Pick the next step from the player's surroundings."""
    position = state["player"]["position"]
    size = state["tiles_in_row"]
    candidates = []
    for name, (dl, dc) in DIRECTIONS.items():
        line, column = position["line"] + dl, position["column"] + dc
        if not (0 <= line < size and 0 <= column < size):
            continue
        if not reachable[line][column]:
            continue
        tile_type = state["tiles"][line][column]["type"]
        key = (position["room"], line, column)
        priority = 0 if tile_type in INTERESTING else 1
        candidates.append((priority, visits.get(key, 0), name))
    if not candidates:
        return None
    candidates.sort()
    return candidates[0][2]


def main() -> None:
    """Import the tower given on the command line and explore it."""
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)

    client = httpx.Client(base_url=BASE_URL, timeout=10.0)
    _load_tower(client, sys.argv[1])

    visits: dict[tuple[int, int, int], int] = {}
    for step in range(MAX_STEPS):
        state = client.get("/game/state").json()
        reachable = client.get("/game/reachability").json()
        position = state["player"]["position"]
        key = (position["room"], position["line"], position["column"])
        visits[key] = visits.get(key, 0) + 1

        direction = _choose_direction(state, reachable, visits)
        if direction is None:
            print("Nowhere left to go.")
            break

        resp = client.post("/game/move", json={"direction": direction})
        if resp.status_code == 409:
            print(f"  [{step}] {direction}: blocked")
            continue
        resp.raise_for_status()
        action = resp.json()
        print(f"  [{step}] {direction}: {action['type']}")

    # Print the final player state
    state = client.get("/game/state").json()
    player = state["player"]
    print(
        f"\nFinished in {state['room_name']!r} | HP {player['hp']} ATK {player['atk']} "
        f"DEF {player['def_']} EXP {player['exp']} LV {player['level']}"
    )
    print(f"Keys: {player['inventory']['keys']}  Items: {player['inventory']['items']}")
    client.close()


if __name__ == "__main__":
    main()
