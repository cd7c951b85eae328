"""Gateway: model installer. Provisions the model file into durable local storage."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from huggingface_hub import hf_hub_download

log = logging.getLogger('pw.installer')

WHISPER_CPP_REPO = 'ggerganov/whisper.cpp'


class ModelInstaller:
    """Copies a bundled model file, or downloads it from Hugging Face, into *target_dir*.

    Never called implicitly: transcription itself stays offline.
    """

    def __init__(self, filename: str, target_dir: Path) -> None:
        self._filename = filename
        self._target_dir = target_dir

    @property
    def target_path(self) -> Path:
        return self._target_dir / self._filename

    def install_from_file(self, source: Path, *, overwrite: bool = False) -> Path:
        """Copy a bundled model file into place. Existing files are kept unless *overwrite*."""
        if not source.is_file():
            raise FileNotFoundError(f'Bundled model file not found: {source}')

        target = self.target_path
        if target.exists() and not overwrite:
            log.info('Model already installed at %s', target)
            return target

        self._target_dir.mkdir(parents=True, exist_ok=True)
        partial = target.with_name(target.name + '.part')
        shutil.copyfile(source, partial)
        partial.replace(target)
        log.info('Model file copied to: %s', target)
        return target

    def download(self, repo_id: str = WHISPER_CPP_REPO) -> Path:
        """Fetch the model from *repo_id*. Returns the cached path if already present."""
        target = self.target_path
        if target.exists():
            log.info('Model already installed at %s', target)
            return target

        self._target_dir.mkdir(parents=True, exist_ok=True)
        log.info('Downloading %s from %s', self._filename, repo_id)
        path = hf_hub_download(repo_id=repo_id, filename=self._filename, local_dir=self._target_dir)
        return Path(path)
