"""
reset_data.py
-------------
Utility script to clear all stored data (users, vehicles, rentals) from the
pickle file named by DATA_PATH.

This script is designed for development and testing purposes.

Usage:
    $ DATA_PATH=data.pkl python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ DATA_PATH=data.pkl python seeds.py
"""

import os

from marketplace.models.store import Store


def main():
    path = os.getenv("DATA_PATH")
    if not path:
        raise SystemExit("DATA_PATH is not set; nothing to reset.")

    with Store(path) as store:
        store.users.clear()
        store.vehicles.clear()
        store.rentals.clear()

    print(f"{path} has been cleared.")
    print("Tip: run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
