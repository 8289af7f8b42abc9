#!/usr/bin/env python3
"""
Setup validation script for Invoice Batch Extractor.

Checks Python, installed packages and Gemini configuration, and
provides guidance for anything missing.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))


def print_header(text: str):
    """Print a formatted header."""
    print(f"\n{'=' * 60}")
    print(f"  {text}")
    print('=' * 60)


def print_check(name: str, status: bool, message: str = ""):
    """Print a check result."""
    icon = "✅" if status else "❌"
    print(f"{icon} {name}: {message}")


def print_info(message: str):
    """Print an info message."""
    print(f"ℹ️  {message}")


def check_python_version():
    """Check Python version."""
    print_header("Python Version")

    version = sys.version_info
    required = (3, 9)

    is_ok = version >= required
    print_check(
        "Python",
        is_ok,
        f"{version.major}.{version.minor}.{version.micro} "
        f"({'OK' if is_ok else f'requires {required[0]}.{required[1]}+'})"
    )

    return is_ok


def check_python_packages():
    """Check required Python packages."""
    print_header("Python Packages")

    # import name -> distribution name
    required_packages = {
        "streamlit": "streamlit",
        "pandas": "pandas",
        "openpyxl": "openpyxl",
        "httpx": "httpx",
        "requests": "requests",
        "dotenv": "python-dotenv",
    }

    all_ok = True

    for import_name, display_name in required_packages.items():
        try:
            __import__(import_name)
            print_check(display_name, True, "Installed")
        except ImportError:
            print_check(display_name, False, "Not installed")
            all_ok = False

    if not all_ok:
        print_info("\nInstall missing packages with:")
        print_info("  pip install -e .")

    return all_ok


def check_env_file():
    """Check for .env file."""
    print_header("Environment Configuration")

    if Path(".env").exists():
        print_check(".env file", True, "Found")
    else:
        print_info(".env file not found; GEMINI_API_KEY must be set in the environment")
    return True


def check_gemini():
    """Check the Gemini API key and connectivity."""
    print_header("Gemini API")

    from invoice_extractor.config import get_config

    gemini = get_config().gemini

    key_ok, key_msg = gemini.validate_api_key()
    print_check("API Key", key_ok, key_msg.splitlines()[0])
    if not key_ok:
        return False

    reachable, message = gemini.validate_connection()
    print_check("Connectivity", reachable, message)
    return reachable


def main():
    """Run all checks."""
    print("\n" + "=" * 60)
    print("  Invoice Batch Extractor - Setup Validation")
    print("=" * 60)

    results = {}

    results["python"] = check_python_version()
    results["packages"] = check_python_packages()
    results["env"] = check_env_file()
    results["gemini"] = check_gemini() if results["packages"] else False

    print_header("Summary")

    ready = all(results.values())
    if ready:
        print("✅ System is ready to run the application!")
        print("\nStart with:")
        print("  streamlit run invoice_extractor/main.py")
    else:
        print("❌ Some requirements are missing:")
        if not results["python"]:
            print("  - Python 3.9+ required")
        if not results["packages"]:
            print("  - Some Python packages missing (run: pip install -e .)")
        if not results["gemini"]:
            print("  - Gemini API key missing or API unreachable")

    print()
    return 0 if ready else 1


if __name__ == "__main__":
    sys.exit(main())
