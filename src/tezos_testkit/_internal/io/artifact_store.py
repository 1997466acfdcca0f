"""Contracts bundle: on-disk layout of contract sources and build records (internal)."""

import json
from pathlib import Path, PurePosixPath
from typing import Tuple, Union

from pydantic import ValidationError

from tezos_testkit._internal.canonical_json import write_canonical_json
from tezos_testkit.errors import NeverCompiledError, SourceUnreadableError
from tezos_testkit.kernel.build_record import BuildRecord
from tezos_testkit.kernel.hash_utils import hash_source

# Searched in order when locating a contract source
SOURCE_EXTENSIONS: Tuple[str, ...] = (".ligo", ".mligo", ".religo", ".jsligo")


class ContractsBundle:
    """Sources under <root>/<contracts_directory>, builds under <root>/<output_directory>.

    Paths handed out by this class are POSIX paths relative to the root, which
    is also how build records store them.
    """

    def __init__(
        self,
        root: Union[str, Path],
        contracts_directory: str = "contracts",
        output_directory: str = "build",
    ) -> None:
        self.root = Path(root)
        self.contracts_directory = contracts_directory
        self.output_directory = output_directory

    def _resolve(self, relative_path: str) -> Path:
        return self.root / Path(relative_path)

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def get_contract_file(self, contract_name: str) -> str:
        """Relative path of the contract source.

        Falls back to the first extension when no candidate exists yet, so the
        caller can report a missing source with a sensible path.
        """
        base = PurePosixPath(self.contracts_directory)
        candidates = [str(base / f"{contract_name}{ext}") for ext in SOURCE_EXTENSIONS]
        for candidate in candidates:
            if self.exists(candidate):
                return candidate
        return candidates[0]

    def get_build_file(self, contract_name: str) -> str:
        return str(PurePosixPath(self.output_directory) / f"{contract_name}.json")

    def read_contract(self, contract_name: str) -> bytes:
        """Raw bytes of the contract source, exactly as hashed.

        Raises:
            SourceUnreadableError: If the file cannot be read
        """
        source_path = self.get_contract_file(contract_name)
        try:
            return self._resolve(source_path).read_bytes()
        except OSError as e:
            raise SourceUnreadableError(contract_name, source_path, str(e)) from e

    def build_file_exists(self, contract_name: str) -> bool:
        return self.exists(self.get_build_file(contract_name))

    def read_build_file(self, contract_name: str) -> BuildRecord:
        """Load a build record.

        A record that is absent, not JSON, or lacks sourcePath/hash counts as
        never compiled. A record with missing code still loads; classify()
        reports it.

        Raises:
            NeverCompiledError: If no usable record exists
        """
        path = self._resolve(self.get_build_file(contract_name))
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise NeverCompiledError(contract_name) from e
        except json.JSONDecodeError as e:
            raise NeverCompiledError(contract_name) from e

        try:
            return BuildRecord.model_validate(data)
        except ValidationError as e:
            raise NeverCompiledError(contract_name) from e

    def write_build_file(self, contract_name: str, record: BuildRecord) -> Path:
        path = self._resolve(self.get_build_file(contract_name))
        write_canonical_json(path, record.to_json_dict())
        return path

    def generate_hash(self, content: Union[str, bytes]) -> str:
        return hash_source(content)
