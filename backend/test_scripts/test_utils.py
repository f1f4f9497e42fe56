"""
CalcBZ Test Utilities

Shared helpers for the test suites and the test runner: colored console
output and unique identifiers for test data.
"""
import sys
import time


# ============================================================================
# ANSI COLOR CODES
# ============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    GREEN = '\033[0;32m'
    YELLOW = '\033[1;33m'
    RED = '\033[0;31m'
    BLUE = '\033[0;34m'
    CYAN = '\033[0;36m'
    BOLD = '\033[1m'
    NC = '\033[0m'  # No Color


# ============================================================================
# OUTPUT FORMATTING FUNCTIONS
# ============================================================================

def print_header(text: str):
    """Print a formatted header (large, centered)."""
    print(f"\n{Colors.CYAN}{'=' * 70}{Colors.NC}")
    print(f"{Colors.CYAN}{text:^70}{Colors.NC}")
    print(f"{Colors.CYAN}{'=' * 70}{Colors.NC}\n")


def print_section(title: str):
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print('=' * 60)


def print_success(message: str):
    print(f"{Colors.GREEN}✅ {message}{Colors.NC}")


def print_error(message: str):
    print(f"{Colors.RED}❌ {message}{Colors.NC}")


def print_warning(message: str):
    print(f"{Colors.YELLOW}⚠️  {message}{Colors.NC}")


def print_info(message: str):
    print(f"{Colors.BLUE}ℹ️  {message}{Colors.NC}")


# ============================================================================
# TEST SUMMARY
# ============================================================================

def print_test_summary(results: dict[str, bool], suite_name: str = "Test Suite") -> bool:
    """
    Print a formatted test summary.

    Args:
        results: Dictionary mapping test name to pass/fail boolean
        suite_name: Name of the test suite

    Returns:
        True when every entry passed
    """
    print_section(f"{suite_name} Summary")

    passed = sum(1 for r in results.values() if r)
    total = len(results)

    for test_name, result in results.items():
        status = f"{Colors.GREEN}PASS{Colors.NC}" if result else f"{Colors.RED}FAIL{Colors.NC}"
        print(f"{status}: {test_name}")

    print(f"\n  Results: {passed}/{total} passed")

    if passed == total:
        print_success(f"All {suite_name.lower()} passed")
    else:
        print_error(f"{total - passed} failed")
    return passed == total


def exit_with_result(success: bool):
    """Exit with appropriate code based on result."""
    sys.exit(0 if success else 1)


# ============================================================================
# RECORDS HELPER
# ============================================================================

_counter = 0


def unique_id(prefix: str = "TEST") -> str:
    """Generate unique identifier for test data (client ids, titles)."""
    global _counter
    _counter += 1
    return f"{prefix}_{int(time.time() * 1000)}_{_counter}"
