# backend/barflow/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite file is the saved store image (backend/instance/barflow.sqlite3)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///barflow.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Currency symbol seeded into the settings table of a brand new store
    DEFAULT_CURRENCY = os.environ.get("BARFLOW_CURRENCY", "€")

    # bcrypt cost factor for staff PINs
    PIN_HASH_ROUNDS = int(os.environ.get("BARFLOW_PIN_HASH_ROUNDS", "12"))

    SEED_DEMO_DATA = True
    INIT_STORE_ON_START = True
