import os

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key')

    # Спочатку пробуємо власну змінну, потім стандартну від Render
    uri = os.environ.get('RENDER_DATABASE_URL') or os.environ.get('DATABASE_URL')

    if uri and uri.startswith('postgresql://'):
        uri = uri.replace('postgresql://', 'postgresql+psycopg://', 1)

    SQLALCHEMY_DATABASE_URI = uri or f"sqlite:///{os.path.join(basedir, 'instance', 'shift_production.db')}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # ── Google Sheets
    GOOGLE_SHEET_ID = os.environ.get('GOOGLE_SHEET_ID')
    GOOGLE_APPLICATION_CREDENTIALS = os.environ.get(
        'GOOGLE_APPLICATION_CREDENTIALS', os.path.join(basedir, 'keys.json')
    )

    # Довідники (перший рядок — заголовки)
    MACHINES_RANGE = os.environ.get('MACHINES_RANGE', 'MachineMaster!A2:C')
    ITEMS_RANGE = os.environ.get('ITEMS_RANGE', 'ItemMaster!A2:G')
    DOERS_RANGE = os.environ.get('DOERS_RANGE', 'Doers!A2:D')
    SUPERVISORS_RANGE = os.environ.get('SUPERVISORS_RANGE', 'Supervisors!A2:D')

    # Куди дописуємо рядки: змінний звіт або добовий (зміна "A+B")
    SHIFT_REPORT_RANGE = os.environ.get('SHIFT_REPORT_RANGE', 'ShiftProductionReport!A:N')
    DAILY_REPORT_RANGE = os.environ.get('DAILY_REPORT_RANGE', 'DailyProductionReport!A:N')
