import os
import sys


def pytest_sessionstart(session):
    """Put the running interpreter's bin directory first on PATH.

    ``test_cli_module_smoke`` launches ``python -m einloop`` in a subprocess;
    inside a virtualenv without a global ``python`` shim that launcher must
    resolve to the interpreter running the tests.
    """

    bin_dir = os.path.dirname(sys.executable)
    path = os.environ.get("PATH", "")
    if bin_dir and bin_dir not in path.split(os.pathsep):
        os.environ["PATH"] = os.pathsep.join([bin_dir, path]) if path else bin_dir
