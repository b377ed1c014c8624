"""
Run Alembic migrations without the local alembic/ directory shadowing the package.

Usage: python run_migration.py
"""
import os
import shutil
import subprocess
import sys

project_root = os.path.dirname(os.path.abspath(__file__))
env = os.environ.copy()
env["PYTHONPATH"] = project_root

alembic_exe = shutil.which("alembic") or "alembic"

print(f"Using alembic: {alembic_exe}")
print(f"PYTHONPATH: {project_root}")

result = subprocess.run(
    [alembic_exe, "upgrade", "head"],
    cwd=project_root,
    env=env,
    capture_output=True,
    text=True,
)

print("STDOUT:", result.stdout)
print("STDERR:", result.stderr)
print("Exit code:", result.returncode)
sys.exit(result.returncode)
