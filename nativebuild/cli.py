import sys
from pathlib import Path
from typing import Optional

import typer

from nativebuild.build.layers import Layers
from nativebuild.build.orchestrator import NativeImage
from nativebuild.classpath.resolver import join_classpath
from nativebuild.config import BuildConfig
from nativebuild.errors import NativeBuildError
from nativebuild.logger import setup_logger
from nativebuild.manifest import DEFAULT_MANIFEST, ManifestProperties, read_manifest


app = typer.Typer(
    name="nativebuild",
    help="nativebuild: compile exploded Spring Boot applications with native-image",
    add_completion=False,
)

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
):

    setup_logger(verbose=verbose)


def _load_manifest(application: Path, manifest: Optional[Path]) -> ManifestProperties:
    path = manifest if manifest is not None else application / DEFAULT_MANIFEST
    return ManifestProperties.from_mapping(read_manifest(path))


@app.command()
def classpath(
    application: Path = typer.Option(..., "--application", "-a"),
    manifest: Optional[Path] = typer.Option(
        None,
        "--manifest",
        "-m",
        help="Manifest to read (default: <application>/META-INF/MANIFEST.MF)",
    ),
):

    try:
        properties = _load_manifest(application, manifest)
        native_image = NativeImage(application, "", properties)
        typer.echo(join_classpath(native_image.classpath()))

    except NativeBuildError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        sys.exit(exc.exit_code)


@app.command()
def build(
    application: Path = typer.Option(..., "--application", "-a"),
    layers: Path = typer.Option(..., "--layers", "-l"),
    args: Optional[str] = typer.Option(
        None,
        "--args",
        help="native-image arguments (default: $BP_NATIVE_IMAGE_BUILD_ARGUMENTS)",
    ),
    stack: Optional[str] = typer.Option(
        None,
        "--stack",
        help="Stack id (default: $CNB_STACK_ID)",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for native-image before giving up",
    ),
    manifest: Optional[Path] = typer.Option(
        None,
        "--manifest",
        "-m",
        help="Manifest to read (default: <application>/META-INF/MANIFEST.MF)",
    ),
):

    try:
        typer.echo("Building native image")

        config = BuildConfig.from_environment(
            application_root=application,
            layers_root=layers,
            arguments=args,
            stack_id=stack,
            timeout=timeout,
        )
        properties = _load_manifest(config.application_root, manifest)

        native_image = NativeImage(
            config.application_root,
            config.arguments,
            properties,
            config.stack_id,
            timeout=config.timeout,
        )

        layer_store = Layers(config.layers_root)
        layer = layer_store.layer(config.layer_name)
        layer = native_image.contribute(layer)
        layer_store.persist(layer)

        typer.echo("Build complete!")
        typer.echo(f"Executable: {config.application_root / properties.start_class}")

    except NativeBuildError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        sys.exit(exc.exit_code)

def run_cli() -> None:
    app()


if __name__ == "__main__":
    run_cli()
