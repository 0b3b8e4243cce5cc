"""JSON reporter for structured output and GitHub Actions integration.

Generates JSON output suitable for:
- Scripted post-processing of transfer results
- GitHub Actions workflow outputs
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from s3stream.models import Chunk, Part, Strategy, TransferResult
from s3stream.reporters.base import Reporter


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: Optional file path to write JSON output
        github_output: If True, write to GITHUB_OUTPUT for Actions
    """

    def __init__(
        self,
        output_path: Optional[str] = None,
        github_output: bool = False,
    ):
        self.output_path = output_path
        self.github_output = github_output
        self._results: list[TransferResult] = []

    def on_transfer_start(
        self,
        source: str,
        destination: str,
        total_size: int,
        strategy: Optional[Strategy],
    ) -> None:
        """No-op for JSON reporter."""
        pass

    def on_chunk(self, chunk: Chunk, total_size: int) -> None:
        """No-op for JSON reporter."""
        pass

    def on_part_uploaded(self, part: Part) -> None:
        """No-op - part count comes from the transfer result."""
        pass

    def on_transfer_complete(self, result: TransferResult) -> None:
        """Stores the result for final output generation."""
        self._results.append(result)

    def on_run_complete(self, results: list[TransferResult]) -> dict:
        """Generates and outputs JSON data.

        Args:
            results: All transfer results of the run

        Returns:
            The generated JSON data as a dictionary
        """
        output = self._generate_output(results)

        if self.output_path:
            self._write_to_file(output)

        if self.github_output:
            self._write_github_output(output)

        return output

    def _generate_output(self, results: list[TransferResult]) -> dict:
        """Generate the JSON output structure."""
        timestamp = datetime.now(timezone.utc).isoformat()

        succeeded = sum(1 for r in results if r.succeeded)
        total_bytes = sum(r.bytes_transferred for r in results)

        return {
            "timestamp": timestamp,
            "transfers": [result.to_dict() for result in results],
            "summary": {
                "total_transfers": len(results),
                "succeeded": succeeded,
                "failed": len(results) - succeeded,
                "bytes_transferred": total_bytes,
                "all_succeeded": succeeded == len(results) and len(results) > 0,
            },
        }

    def _write_to_file(self, output: dict) -> None:
        path = Path(self.output_path)

        # Create parent directories if needed
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.output_path, "w") as f:
            json.dump(output, f, indent=2)

    def _write_github_output(self, output: dict) -> None:
        github_output_file = os.environ.get("GITHUB_OUTPUT")
        if not github_output_file:
            return

        with open(github_output_file, "a") as f:
            f.write(f"all_succeeded={str(output['summary']['all_succeeded']).lower()}\n")
            f.write(f"total_transfers={output['summary']['total_transfers']}\n")
            f.write(f"failed_transfers={output['summary']['failed']}\n")

            # Write full JSON as multiline output
            f.write("results<<EOF\n")
            f.write(json.dumps(output))
            f.write("\nEOF\n")
