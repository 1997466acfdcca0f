"""LIGO compiler adapter: runs the ligo CLI and writes the resulting build record."""

import json
import subprocess
from datetime import datetime, timezone
from typing import List

import structlog

from tezos_testkit._internal.canonical_json import canonical_dumps
from tezos_testkit._internal.io.artifact_store import ContractsBundle
from tezos_testkit.config import RunConfig
from tezos_testkit.errors import CompilationError
from tezos_testkit.kernel.build_record import BuildRecord

logger = structlog.get_logger(__name__)

LIGO_DOCKER_IMAGE = "ligolang/ligo"


class LigoCompiler:
    """Compile contracts with `ligo compile contract ... --michelson-format json`.

    With `dockerized` set in the config the pinned ligolang/ligo image is used
    instead of a local executable; the project root is mounted at the same path.
    """

    def __init__(self, bundle: ContractsBundle, config: RunConfig) -> None:
        self.bundle = bundle
        self.config = config

    def build_command(self, source_path: str) -> List[str]:
        args = ["compile", "contract", source_path, "--michelson-format", "json"]
        if self.config.dockerized:
            root = str(self.bundle.root.resolve())
            return [
                "docker", "run", "--rm",
                "-v", f"{root}:{root}",
                "-w", root,
                f"{LIGO_DOCKER_IMAGE}:{self.config.ligo_version}",
                *args,
            ]
        return [self.config.ligo_executable, *args]

    def compile(self, contract_name: str) -> None:
        """Compile one contract and overwrite its build record.

        Raises:
            CompilationError: If the source is missing, the compiler cannot be
                started, exits non-zero, or prints something that is not JSON
        """
        source_path = self.bundle.get_contract_file(contract_name)
        if not self.bundle.exists(source_path):
            raise CompilationError(
                contract_name,
                f'ERROR: Cannot compile "{contract_name}", source "{source_path}" not found.',
            )

        command = self.build_command(source_path)
        logger.info("compile_command", contract=contract_name, command=" ".join(command))
        try:
            completed = subprocess.run(
                command,
                cwd=self.bundle.root,
                check=False,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise CompilationError(
                contract_name,
                f'ERROR: Unable to run "{command[0]}" to compile "{contract_name}": {e}',
            ) from e

        if completed.returncode != 0:
            raise CompilationError(
                contract_name,
                f'ERROR: Compilation of contract "{contract_name}" failed:\n\n'
                f"{completed.stderr.strip() or 'compiler exited with status ' + str(completed.returncode)}",
            )

        try:
            michelson = json.loads(completed.stdout)
        except json.JSONDecodeError as e:
            raise CompilationError(
                contract_name,
                f'ERROR: Compiler output for "{contract_name}" is not JSON-Michelson.',
                internal_details=f"{e}; stdout starts with {completed.stdout[:200]!r}",
            ) from e

        source = self.bundle.read_contract(contract_name)
        record = BuildRecord(
            source_path=source_path,
            hash=self.bundle.generate_hash(source),
            michelson=canonical_dumps(michelson),
            contract_name=contract_name,
            compiler="ligo",
            compiler_version=self.config.ligo_version,
            updated_at=datetime.now(timezone.utc).isoformat(),
        )
        path = self.bundle.write_build_file(contract_name, record)
        logger.info("contract_compiled", contract=contract_name, build_file=str(path))
