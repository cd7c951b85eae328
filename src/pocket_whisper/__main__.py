from pocket_whisper.l4_frameworks_and_drivers.cli import cli

cli()
