"""Store profile commands."""

import click
from bizdocs.cli.error_handling import handle_domain_error
from bizdocs.domain.errors import DomainError
from bizdocs.domain.store_profile import StoreProfileService


def print_profile(profile) -> None:
    click.echo(f"\nStore Profile (ID: {profile.id})")
    click.echo(f"  Name:    {profile.name}")
    click.echo(f"  Address: {profile.address}")
    click.echo(f"  Phone:   {profile.phone}")
    click.echo(f"  Email:   {profile.email}")
    click.echo(f"  NPWP:    {profile.npwp}")


@click.group()
def store_group():
    """Manage the store profile printed on documents."""
    pass


@store_group.command("create")
@click.argument("name")
@click.option("--address", required=True, help="Store address")
@click.option("--phone", required=True, help="Phone number")
@click.option("--email", required=True, help="Email address")
@click.option("--npwp", required=True, help="Tax registration number (NPWP)")
@click.pass_context
def create_store(ctx, name: str, address: str, phone: str, email: str, npwp: str):
    """Create the store profile."""
    service = StoreProfileService(ctx.obj["db"])

    try:
        profile = service.create_profile(name=name, address=address, phone=phone, email=email, npwp=npwp)
        click.echo(f"Created store profile '{profile.name}' (ID: {profile.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@store_group.command("show")
@click.pass_context
def show_store(ctx):
    """Show the store profile."""
    service = StoreProfileService(ctx.obj["db"])

    profile = service.get_profile()
    if profile is None:
        click.echo("No store profile found. Run 'store create' first.")
        return
    print_profile(profile)


@store_group.command("update")
@click.option("--name", help="Store name")
@click.option("--address", help="Store address")
@click.option("--phone", help="Phone number")
@click.option("--email", help="Email address")
@click.option("--npwp", help="Tax registration number (NPWP)")
@click.pass_context
def update_store(ctx, name, address, phone, email, npwp):
    """Update the store profile.

    Updates only the fields that are provided.
    """
    service = StoreProfileService(ctx.obj["db"])

    profile = service.get_profile()
    if profile is None:
        click.echo("Error: No store profile found. Run 'store create' first.", err=True)
        ctx.exit(1)

    try:
        service.update_profile(profile.id, name=name, address=address, phone=phone, email=email, npwp=npwp)
        click.echo(f"Updated store profile {profile.id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register store commands with main CLI."""
    cli.add_command(store_group, name="store")
