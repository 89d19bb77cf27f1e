from pathlib import Path

DOIT_CONFIG = {
    "default_tasks": ["format", "test"],
    "backend": "json",
}

HERE = Path(__file__).parent


def task_format():
    """Reformat all files using black."""
    return {"actions": [["black", HERE]], "verbosity": 1}


def task_test():
    """Run Pytest with coverage."""
    return {"actions": [["pytest", "--cov=meerkatmap"]], "verbosity": 2}
