import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_exit_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

EXIT_STEPS_REQUIRE_APPROVAL = bool(int(os.getenv("EXIT_STEPS_REQUIRE_APPROVAL", "0")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
