import os
import subprocess
from typing import List, Optional

from ..common import eprint
from ..common.errors import DeobfuscationError


def default_java_executable():
    if "JAVA_HOME" in os.environ:
        return os.path.join(os.environ["JAVA_HOME"], "bin", "java")
    return "java"


class JavaExecutionHelper:
    def __init__(self, java_executable: Optional[str] = None):
        self.java_executable = java_executable or default_java_executable()

    def execute(self, jar, args: List[str], function: Optional[str] = None, cwd=None):
        command = [self.java_executable, "-jar", str(jar), *[str(a) for a in args]]
        eprint("Running %s" % " ".join(command))
        try:
            proc = subprocess.run(
                command,
                cwd=cwd,
                text=True,
                capture_output=True,
                check=False,
            )
        except OSError as e:
            raise DeobfuscationError(
                f"Failed to start {self.java_executable}: {e}", function=function, path=jar
            ) from e

        if proc.returncode != 0:
            stderr = proc.stderr.strip().splitlines()[-20:]
            raise DeobfuscationError(
                "java exited with code %d:\n%s" % (proc.returncode, "\n".join(stderr)),
                function=function,
                path=jar,
            )
        return proc.stdout
