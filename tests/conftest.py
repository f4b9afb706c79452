"""
Point the application at a throwaway SQLite database and storage folder
before any workforce module reads its settings.
"""
import os
import tempfile

_workdir = tempfile.mkdtemp(prefix="workforce-tests-")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_workdir, 'test.db')}"
os.environ["STORAGE_DIR"] = os.path.join(_workdir, "storage")
os.environ["RESEND_API_KEY"] = ""
os.environ["SUPERADMIN_EMAIL"] = "super@workforce.co.uk"
os.environ["LOG_LEVEL"] = "WARNING"
