"""
Path mapping
Turns an inbound path into the script file to fetch from the repository
"""
from enum import Enum
from typing import List, Optional
from dataclasses import dataclass


class ScriptType(str, Enum):
    """Script family, also the subdirectory under scripts/"""
    BASH = 'bash'
    POWERSHELL = 'powershell'


ALLOWED_FILE_NAMES = frozenset({'prepare.sh', 'prepare.ps1'})

CONTENT_TYPES = {
    ScriptType.BASH: 'application/x-sh',
    ScriptType.POWERSHELL: 'application/x-powershell',
}


@dataclass(frozen=True)
class ScriptTarget:
    """A resolved, allow-listed script"""
    file_name: str
    script_type: ScriptType
    upstream_path: str

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES[self.script_type]

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.file_name}"'


def split_path(path: str) -> List[str]:
    """Split a catch-all path into segments ('' -> [])"""
    if not path:
        return []
    return path.split('/')


def script_type_for(file_name: str) -> ScriptType:
    """Infer the script type from the file extension"""
    if file_name.endswith('.sh'):
        return ScriptType.BASH
    return ScriptType.POWERSHELL


def resolve_script(segments: List[str]) -> Optional[ScriptTarget]:
    """
    Map path segments to an upstream script

    The last segment is lower-cased and must be allow-listed; earlier
    segments are kept as-is and the script type directory is inserted
    before the file name:

        ['v2', 'PREPARE.PS1'] -> 'v2/powershell/prepare.ps1'

    Returns:
        ScriptTarget, or None when the path should redirect
    """
    if not segments:
        return None

    file_name = segments[-1].lower()
    if not file_name or file_name not in ALLOWED_FILE_NAMES:
        return None

    script_type = script_type_for(file_name)
    upstream_path = '/'.join([*segments[:-1], script_type.value, file_name])
    return ScriptTarget(file_name=file_name, script_type=script_type, upstream_path=upstream_path)
