# Overview: Flask extension instance for the ledger database.

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
