"""Process runner used by the external tool adapters"""

import logging
import os
import subprocess
from typing import Iterator, List, Optional


class ProcessRunner:
    """Runs external commands synchronously and returns their text output

    Failures never propagate: a command that exits non-zero, cannot be
    started or exceeds the timeout is logged and produces empty output.
    """

    def __init__(self, timeout: Optional[float] = None, logger: Optional[logging.Logger] = None):
        """Initialize the runner

        Args:
            timeout: Seconds to wait for a command, None waits forever
            logger: Logger instance for output
        """
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def run(self, cmd: List[str], decode_method: str = 'utf-8') -> str:
        """Execute a command and return its output

        Args:
            cmd: Command to execute as list of strings
            decode_method: Method to decode command output

        Returns:
            str: Command output as string, empty on failure
        """
        self.logger.debug(f"Executing command: {' '.join(cmd)}")

        try:
            output_bytes = subprocess.check_output(cmd, stderr=subprocess.DEVNULL, timeout=self.timeout)
        except subprocess.CalledProcessError as e:
            self.logger.error(f"Error executing command {' '.join(cmd)}: {e}")
            # sg3_utils tools exit non-zero on partial answers, keep what they printed
            output_bytes = e.output or b""
        except subprocess.TimeoutExpired:
            self.logger.error(f"Command {' '.join(cmd)} timed out after {self.timeout} seconds")
            return ""
        except OSError as e:
            self.logger.error(f"Unable to run {cmd[0]}: {e}")
            return ""

        return self._decode(output_bytes, decode_method)

    def stream(self, cmd: List[str], decode_method: str = 'utf-8') -> Iterator[str]:
        """Execute a command and yield its output line by line

        Without a timeout lines are yielded as the command prints them. With a
        timeout the whole output is collected first, and a command that runs
        past it is killed and yields nothing.

        Args:
            cmd: Command to execute as list of strings
            decode_method: Method to decode each line

        Yields:
            str: Output lines without trailing newline
        """
        self.logger.debug(f"Streaming command: {' '.join(cmd)}")

        try:
            proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL)
        except OSError as e:
            self.logger.error(f"Unable to run {cmd[0]}: {e}")
            return

        with proc:
            if self.timeout is None:
                for raw_line in proc.stdout:
                    yield self._decode(raw_line, decode_method).rstrip("\r\n")
                returncode = proc.wait()
            else:
                try:
                    output_bytes, _ = proc.communicate(timeout=self.timeout)
                except subprocess.TimeoutExpired:
                    proc.kill()
                    proc.wait()
                    self.logger.error(f"Command {' '.join(cmd)} timed out after {self.timeout} seconds")
                    return
                returncode = proc.returncode
                for line in self._decode(output_bytes, decode_method).splitlines():
                    yield line

        if returncode != 0:
            self.logger.debug(f"Command {' '.join(cmd)} exited with status {returncode}")

    def exists(self, path: str) -> bool:
        """Check if an executable is present on the filesystem"""
        return os.path.isfile(path) and os.access(path, os.X_OK)

    def _decode(self, output_bytes: bytes, decode_method: str) -> str:
        try:
            return output_bytes.decode(decode_method)
        except UnicodeDecodeError:
            self.logger.debug(f"{decode_method} decoding failed, falling back to latin-1")
            return output_bytes.decode('latin-1')
