"""CLI entry point for pocket-whisper."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from pocket_whisper import __version__
from pocket_whisper.l1_entities.audio_constants import PCM_SAMPLE_WIDTH, SAMPLE_RATE
from pocket_whisper.l1_entities.config import AppConfig
from pocket_whisper.l1_entities.errors import MalformedAudioError
from pocket_whisper.l2_use_cases.utils.audio_normalizer import decode_pcm16, rms, split_into_chunks

log = logging.getLogger('pw.cli')


def _load_config(config_path: str | None, overrides: dict | None = None):
    """Load YAML config on top of defaults. Exits with status 1 on any config problem."""
    import yaml  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help

    from pocket_whisper.l3_interface_adapters.gateways.yaml_config_loader import (  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help
        YamlConfigLoader,
    )
    from pocket_whisper.l4_frameworks_and_drivers.infra_config import (  # noqa: PLC0415 -- deferred: not needed for --help
        InfraConfig,
        build_app_config,
    )

    try:
        raw = YamlConfigLoader().load_raw(config_path, overrides=overrides)
        config = build_app_config(raw)
        infra = InfraConfig.model_validate(raw)
    except (FileNotFoundError, ValueError, ValidationError, yaml.YAMLError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)
    return config, infra


def _is_silent(chunk: bytes, threshold: float) -> bool:
    try:
        return rms(decode_pcm16(chunk)) < threshold
    except MalformedAudioError:
        return False  # let the pipeline reject it


def _transcribe_chunks(controller, pcm: bytes, config: AppConfig, as_json: bool) -> bool:
    """Submit *pcm* chunk by chunk and print each result. Returns False on the first failure."""
    tc = config.transcription
    chunk_samples = max(1, int(tc.chunk_duration * SAMPLE_RATE))
    submitted = 0

    for index, chunk in enumerate(split_into_chunks(pcm, chunk_samples * PCM_SAMPLE_WIDTH)):
        offset = index * chunk_samples / SAMPLE_RATE
        if _is_silent(chunk, tc.silence_threshold):
            log.debug('Skipping silent chunk at %.1fs', offset)
            continue

        submitted += 1
        outcome = controller.transcribe_pcm(chunk).result()
        if not outcome.ok:
            click.echo(f'Error [{outcome.code}] at {offset:.1f}s: {outcome.error}', err=True)
            return False

        result = outcome.result
        if as_json:
            click.echo(json.dumps({'offset': offset, **result.model_dump()}, ensure_ascii=False))
        elif result.text:
            click.echo(result.text)

    if submitted == 0:
        click.echo('No speech detected.', err=True)
    return True


@click.group()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to YAML config file.',
)
@click.option(
    '--log-file',
    default=None,
    type=click.Path(dir_okay=False),
    help='Write debug logs to this file.',
)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config_path, log_file):
    """pocket-whisper -- offline speech-to-text on a bundled whisper.cpp model."""
    if log_file:
        from pocket_whisper.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: only with --log-file
            setup_file_logging,
        )

        setup_file_logging(Path(log_file))
    ctx.obj = {'config_path': config_path}


@cli.command()
@click.argument('audio_file', type=click.Path(exists=True, dir_okay=False))
@click.option('-l', '--language', default=None, help="Language code, or 'auto'.")
@click.option('--chunk-duration', type=float, default=None, help='Seconds of audio per transcription request.')
@click.option('--json', 'as_json', is_flag=True, help='Print one JSON object per chunk.')
@click.pass_context
def transcribe(ctx, audio_file, language, chunk_duration, as_json):
    """Transcribe AUDIO_FILE (.pcm/.raw as 16 kHz s16le, anything else via ffmpeg)."""
    overrides: dict = {}
    if language:
        overrides.setdefault('transcription', {})['language'] = language
    if chunk_duration is not None:
        overrides.setdefault('transcription', {})['chunk_duration'] = chunk_duration
    config, infra = _load_config(ctx.obj['config_path'], overrides or None)

    from pocket_whisper.l3_interface_adapters.gateways.audio_file_loader import (  # noqa: PLC0415 -- deferred: only for transcribe
        load_pcm_bytes,
    )
    from pocket_whisper.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: whisper.cpp not loaded on --help
        DependencyContainer,
    )

    try:
        pcm = load_pcm_bytes(Path(audio_file))
    except (FileNotFoundError, RuntimeError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)

    controller = DependencyContainer(config, infra).controller
    try:
        if not controller.wait_until_ready():
            status = controller.get_status()
            click.echo(f'Error: Whisper model is not loaded ({status.state.value}): {status.model_path}', err=True)
            sys.exit(1)
        ok = _transcribe_chunks(controller, pcm, config, as_json)
    finally:
        controller.teardown()

    if not ok:
        sys.exit(1)


@cli.command()
@click.option('--wait/--no-wait', default=True, help='Wait for the model load to finish before reporting.')
@click.pass_context
def status(ctx, wait):
    """Report whether the model loads and where it is."""
    config, infra = _load_config(ctx.obj['config_path'])

    from pocket_whisper.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: whisper.cpp not loaded on --help
        DependencyContainer,
    )

    controller = DependencyContainer(config, infra).controller
    try:
        if wait:
            controller.wait_until_ready()
        st = controller.get_status()
        click.echo(f'loaded: {"yes" if st.is_loaded else "no"}')
        click.echo(f'state:  {st.state.value}')
        click.echo(f'model:  {st.model_path}')
        if controller.lifecycle.last_error:
            click.echo(f'error:  {controller.lifecycle.last_error}')
    finally:
        controller.teardown()


@cli.command('fetch-model')
@click.option(
    '--source',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Copy this bundled model file instead of downloading.',
)
@click.option('--force', is_flag=True, help='Overwrite an already installed file (with --source).')
@click.pass_context
def fetch_model(ctx, source, force):
    """Install the model file into the model directory."""
    config, infra = _load_config(ctx.obj['config_path'])
    if Path(config.model.filename).is_absolute():
        click.echo('Error: model.filename is an absolute path; nothing to fetch.', err=True)
        sys.exit(1)

    from pocket_whisper.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: not loaded on --help
        DependencyContainer,
    )

    installer = DependencyContainer.model_installer(config)
    try:
        if source:
            path = installer.install_from_file(Path(source), overwrite=force)
        else:
            path = installer.download(repo_id=infra.huggingface.repo_id)
    except Exception as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)
    click.echo(str(path))
