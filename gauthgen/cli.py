"""Command line interface: generate secrets, validate and print codes."""

import logging
import time

import click

from gauthgen import GoogleAuthenticator, config
from gauthgen.errors import GAuthError, InvalidErrorCorrectionLevel, InvalidSecret
from gauthgen.qr import ErrorCorrectionLevel, write_svg

logger = logging.getLogger(__name__)


class ErrorCorrectionLevelType(click.ParamType):
    name = "ecl"

    def convert(self, value, param, ctx):
        if isinstance(value, ErrorCorrectionLevel):
            return value
        try:
            return ErrorCorrectionLevel.parse(value)
        except InvalidErrorCorrectionLevel as e:
            self.fail(str(e), param, ctx)


@click.group(invoke_without_command=True)
@click.option("-l", "--length", type=click.IntRange(config.MIN_SECRET_LENGTH, config.MAX_SECRET_LENGTH),
              default=config.DEFAULT_SECRET_LENGTH, show_default=True, help="Length of secret in bytes")
@click.option("--ht", "hide_timestamp", is_flag=True, help="Hide UNIX timestamp")
@click.option("-u", "--uri", "show_uri", is_flag=True, help="Print the otpauth:// URI")
@click.option("-q", "--qr", "qrcode", is_flag=True,
              help="Write the QR Code as SVG to qrcode.svg. Won't overwrite.")
@click.option("-n", "--qr-name", default=config.QR_NAME, show_default=True,
              help="Issuer shown in the app, e.g. your company name. Requires --qr.")
@click.option("-t", "--qr-title", default=config.QR_TITLE, show_default=True,
              help="Account shown in the app. Requires --qr.")
@click.option("-w", "--qr-width", type=int, default=config.MIN_QR_SIZE, show_default=True,
              help=f"QR Code width, minimum {config.MIN_QR_SIZE}px. Requires --qr.")
@click.option("-h", "--qr-height", type=int, default=config.MIN_QR_SIZE, show_default=True,
              help=f"QR Code height, minimum {config.MIN_QR_SIZE}px. Requires --qr.")
@click.option("-e", "--ecl", "qr_ecl", type=ErrorCorrectionLevelType(), default="l", show_default=True,
              help="Error correction level: l|low|0, m|medium|1, q|quartile|2, h|high|3. Requires --qr.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages to stderr")
@click.pass_context
def main(ctx, length, hide_timestamp, show_uri, qrcode, qr_name, qr_title,
         qr_width, qr_height, qr_ecl, verbose):
    """Generate Google Authenticator compatible TOTP secrets."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    if ctx.invoked_subcommand is not None:
        return

    auth   = GoogleAuthenticator()
    secret = auth.create_secret(length)
    click.echo(secret)
    if not hide_timestamp:
        click.echo(int(time.time()))
    if show_uri:
        click.echo(auth.provisioning_uri(secret, qr_title, qr_name))

    if qrcode:
        try:
            svg  = auth.qr_code(secret, qr_title, qr_name, qr_width, qr_height, qr_ecl)
            path = write_svg(svg, config.OUTPUT_DIR)
        except GAuthError as e:
            raise click.ClickException(str(e)) from e
        click.echo(path)


@main.command()
@click.argument("secret")
@click.argument("code")
@click.option("-d", "--discrepancy", type=click.IntRange(0, config.MAX_DISCREPANCY), default=0, show_default=True,
              help="Number of 30 second steps of drift accepted on either side")
@click.option("-t", "--time-slice", type=click.IntRange(0, config.MAX_TIMESTAMP), default=0,
              help="UNIX time at which code was generated. Leave empty for current time.")
@click.pass_context
def validate(ctx, secret, code, discrepancy, time_slice):
    """Check CODE against SECRET."""
    if GoogleAuthenticator().verify_code(secret, code, discrepancy, time_slice):
        click.echo("OK")
    else:
        click.echo("Invalid!")
        ctx.exit(1)


@main.command()
@click.argument("secret")
@click.option("-t", "--time-slice", type=click.IntRange(0, config.MAX_TIMESTAMP), default=0,
              help="UNIX time to generate the code for. Leave empty for current time.")
def code(secret, time_slice):
    """Print the code for SECRET."""
    auth = GoogleAuthenticator()
    try:
        click.echo(auth.get_code(secret, auth.get_time_counter(time_slice)))
    except InvalidSecret as e:
        raise click.ClickException(str(e)) from e
