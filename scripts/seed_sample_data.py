# scripts/seed_sample_data.py
import os

from dotenv import load_dotenv

load_dotenv()

from propdesk import create_app  # noqa: E402
from propdesk.seeding import seed_sample_data  # noqa: E402

app = create_app(os.environ.get("CONFIG_CLASS", "propdesk.config.DevelopmentConfig"))
with app.app_context():
    counts = seed_sample_data(app.extensions["propdesk"]["store"])
    print("Seeded:", counts)
