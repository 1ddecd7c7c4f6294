import logging
import os
import subprocess
from typing import List, Mapping, Optional

from .constants import CI_BRANCH_ENV_NAMES, LANE_NAME_ENV
from .utils import pick_first_nonempty

logger = logging.getLogger(__name__)


class BuildFacts:
    """
    Fatos do build usados nos campos padrão do attachment (lane, branch,
    autor, último commit). Apenas leitura; qualquer falha vira None.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None, cwd: Optional[str] = None):
        self.environ = os.environ if environ is None else environ
        self.cwd = cwd

    def _git(self, args: List[str]) -> Optional[str]:
        try:
            result = subprocess.run(
                ['git'] + args,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            logger.debug(f"git {' '.join(args)} falhou: {e}")
            return None
        return pick_first_nonempty(result.stdout)

    def lane_name(self) -> Optional[str]:
        return pick_first_nonempty(self.environ.get(LANE_NAME_ENV))

    def git_branch(self) -> Optional[str]:
        # CI costuma fazer checkout em HEAD destacado, então as variáveis dele vêm primeiro
        from_env = pick_first_nonempty(*(self.environ.get(name) for name in CI_BRANCH_ENV_NAMES))
        if from_env:
            return from_env
        return self._git(['rev-parse', '--abbrev-ref', 'HEAD'])

    def git_author_email(self) -> Optional[str]:
        return self._git(['log', '-1', '--pretty=format:%ae'])

    def last_git_commit_message(self) -> Optional[str]:
        return self._git(['log', '-1', '--pretty=format:%s'])

    def last_git_commit_hash(self) -> Optional[str]:
        return self._git(['rev-parse', '--short', 'HEAD'])
