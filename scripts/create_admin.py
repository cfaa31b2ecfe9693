# scripts/create_admin.py
import os

from dotenv import load_dotenv

load_dotenv()

from propdesk import create_app  # noqa: E402
from propdesk.seeding import ensure_admin  # noqa: E402

EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
PASSWORD = os.environ.get("ADMIN_PASSWORD", "ChangeMeStrong!")

app = create_app(os.environ.get("CONFIG_CLASS", "propdesk.config.DevelopmentConfig"))
with app.app_context():
    ext = app.extensions["propdesk"]
    account = ensure_admin(ext["store"], ext["identity"], EMAIL, PASSWORD)
    print("Admin ensured:", account.uid, account.email)
