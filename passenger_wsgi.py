# backend/passenger_wsgi.py
import sys
import os
from pathlib import Path

# 🔹 Make the project root importable for the hosting process
BASE_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE_DIR))

# 🔹 Hosted deployments always run with the production settings
os.environ.setdefault("ENV", "production")

# 🔹 The host looks the app up under the name "application"
from main import app as application  # noqa: E402
