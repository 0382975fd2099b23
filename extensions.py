from flask_sqlalchemy import SQLAlchemy

from modules.sheets.client import SheetsClient

db = SQLAlchemy()
sheets = SheetsClient()
