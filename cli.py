#!/usr/bin/env python3
"""
DentSync CLI

Command-line interface for the DentSync clinic records.
"""

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

console = Console()


def setup_paths():
    """Add the project root to sys.path for imports."""
    root = Path(__file__).parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


setup_paths()


def setup_logging(level: int) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _store():
    from dentsync.state import Store
    return Store.from_config()


def _parse_day(value: Optional[str], option: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}", param_hint=option)


@click.group()
@click.version_option(version="0.1.0", prog_name="dentsync")
@click.option("--verbose", "-v", is_flag=True, help="Show informational log messages")
def cli(verbose: bool):
    """
    DentSync - Dental Practice Records

    Manage patients, billing and the clinic ledger stored on this machine.
    """
    from dentsync.config import get_config

    config = get_config()
    setup_logging(logging.INFO if verbose else config.log_level_number)


@cli.command()
def info():
    """
    Show clinic settings and record counts.
    """
    from dentsync.config import get_config
    from dentsync.reports import dashboard_stats

    config = get_config()
    state = _store().state
    stats = dashboard_stats(state)

    console.print(Panel(
        f"[bold]{state.clinic_name}[/bold]\n"
        f"Contact: {state.clinic_contact_number or '-'}\n"
        f"Address: {state.clinic_address or '-'}\n\n"
        f"[dim]Data: {config.data_dir / (config.storage_key + '.json')}[/dim]",
        title="Clinic",
        border_style="blue",
    ))

    table = Table(title="Today")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Patients", str(stats.patient_count))
    table.add_row("Appointments today", str(stats.appointments_today))
    table.add_row("Pending bills", str(stats.pending_bills))
    table.add_row("Outstanding", f"₹{stats.outstanding:.2f}")
    table.add_row("Income this month", f"₹{stats.income_this_month:.2f}")
    console.print(table)


@cli.command()
@click.option("--search", "-s", type=str, help="Filter by name or phone")
def patients(search: Optional[str]):
    """
    List patients.
    """
    from dentsync.exporters import export_json_summary

    state = _store().state
    rows = state.patients
    if search:
        needle = search.lower()
        rows = [p for p in rows if needle in p.full_name.lower() or needle in p.phone]

    if not rows:
        console.print("[dim]No patients found[/dim]")
        return

    table = Table(title="Patients")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("DOB")
    table.add_column("Phone")
    table.add_column("Outstanding", justify="right")

    for patient in rows:
        summary = export_json_summary(patient)
        table.add_row(
            summary["id"],
            summary["name"],
            summary["date_of_birth"],
            summary["phone"],
            f"₹{summary['outstanding']:.2f}",
        )

    console.print(table)


@cli.command()
@click.argument("patient_id")
def view(patient_id: str):
    """
    View a patient record summary.

    Example:

        dentsync view 1a2b3c4d
    """
    from dentsync.models import BillingStatus

    state = _store().state
    patient = state.get_patient(patient_id)
    if patient is None:
        console.print(f"[red]No patient with id {patient_id}[/red]")
        return

    console.print()
    console.print(Panel(
        f"[bold]{patient.full_name}[/bold]\n"
        f"ID: {patient.id}\n"
        f"DOB: {patient.date_of_birth}\n"
        f"Gender: {patient.gender.value}\n"
        f"Phone: {patient.phone}\n"
        f"Allergies: {patient.medical_history.allergies or '-'}\n"
        f"Conditions: {patient.medical_history.conditions or '-'}",
        title="Patient",
        border_style="blue",
    ))

    if patient.treatment_plan:
        tree = Tree("[bold]Treatment Plan[/bold]")
        for item in patient.treatment_plan:
            billed = " [green](billed)[/green]" if item.is_billed else ""
            tree.add(f"[cyan]{item.id}[/cyan] {item.procedure} #{item.tooth or 'N/A'} - {item.status.value}{billed}")
        console.print(tree)

    if patient.billing:
        table = Table(title="Billing")
        table.add_column("ID", style="cyan")
        table.add_column("Date")
        table.add_column("Description")
        table.add_column("Amount", justify="right")
        table.add_column("Status")
        for entry in patient.billing:
            color = "green" if entry.status == BillingStatus.PAID else "yellow"
            table.add_row(
                entry.id, entry.date, entry.description,
                f"₹{entry.amount:.2f}", f"[{color}]{entry.status.value}[/{color}]",
            )
        console.print(table)
    else:
        console.print("[dim]No billing entries[/dim]")

    console.print(f"\n[bold]Case notes:[/bold] {len(patient.case_notes)}  "
                  f"[bold]Prescriptions:[/bold] {len(patient.prescriptions)}  "
                  f"[bold]Documents:[/bold] {len(patient.documents)}")


@cli.command("add-patient")
@click.option("--first-name", required=True, help="Given name")
@click.option("--last-name", required=True, help="Family name")
@click.option("--dob", required=True, help="Date of birth (YYYY-MM-DD)")
@click.option("--gender", type=click.Choice(["Male", "Female", "Other"]), required=True)
@click.option("--phone", required=True, help="Contact number")
@click.option("--email", default="", help="Email address")
@click.option("--address", default="", help="Postal address")
@click.option("--allergies", default="", help="Known allergies")
@click.option("--conditions", default="", help="Medical conditions")
def add_patient(
    first_name: str,
    last_name: str,
    dob: str,
    gender: str,
    phone: str,
    email: str,
    address: str,
    allergies: str,
    conditions: str,
):
    """
    Register a new patient.
    """
    from dentsync.models import Gender, MedicalHistory, Patient
    from dentsync.state import AddPatient

    _parse_day(dob, "--dob")
    patient = Patient(
        first_name=first_name,
        last_name=last_name,
        date_of_birth=dob,
        gender=Gender(gender),
        phone=phone,
        email=email,
        address=address,
        medical_history=MedicalHistory(allergies=allergies, conditions=conditions),
    )
    _store().dispatch(AddPatient(patient=patient))
    console.print(f"[green]✓ Added {patient.full_name} ({patient.id})[/green]")


@cli.command()
@click.argument("actions_file", type=click.Path(exists=True, dir_okay=False))
def dispatch(actions_file: str):
    """
    Apply actions from a JSON file.

    The file holds one action or a list of actions, each of the form
    {"type": "ADD_BILLING", "payload": {...}}.
    """
    from dentsync.state import parse_action

    try:
        data = json.loads(Path(actions_file).read_text(encoding="utf-8"))
    except ValueError as e:
        console.print(f"[red]Not valid JSON: {escape(str(e))}[/red]")
        return
    records = data if isinstance(data, list) else [data]

    try:
        actions = [parse_action(record) for record in records]
    except (ValueError, AttributeError) as e:
        # Validate everything before applying anything
        console.print(f"[red]Invalid action: {escape(str(e))}[/red]")
        return

    store = _store()
    for action in actions:
        store.dispatch(action)
    console.print(f"[green]✓ Applied {len(actions)} action(s)[/green]")


@cli.command("bill-item")
@click.argument("patient_id")
@click.argument("item_id")
def bill_item(patient_id: str, item_id: str):
    """
    Bill a treatment-plan item.
    """
    from dentsync.billing import bill_plan_item

    store = _store()
    patient = store.state.get_patient(patient_id)
    item = patient.get_plan_item(item_id) if patient else None
    if item is None:
        console.print(f"[red]No plan item {item_id} for patient {patient_id}[/red]")
        return

    entry = bill_plan_item(store, patient_id, item)
    if entry is None:
        console.print("[yellow]This item has already been added to billing.[/yellow]")
        return
    console.print(f"[green]✓ Billed {entry.description}: ₹{entry.amount:.2f} ({entry.id})[/green]")


@cli.command()
@click.argument("patient_id")
@click.argument("billing_id")
def pay(patient_id: str, billing_id: str):
    """
    Mark a billing entry as paid and record the income.
    """
    from dentsync.billing import mark_paid
    from dentsync.models import BillingStatus

    store = _store()
    patient = store.state.get_patient(patient_id)
    entry = patient.get_billing(billing_id) if patient else None
    if entry is None:
        console.print(f"[red]No billing entry {billing_id} for patient {patient_id}[/red]")
        return
    if entry.status == BillingStatus.PAID:
        console.print("[yellow]Already paid[/yellow]")
        return

    mark_paid(store, patient_id, billing_id)
    console.print(f"[green]✓ Payment of ₹{entry.amount:.2f} recorded[/green]")


@cli.command()
@click.argument("patient_id")
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False))
def attach(patient_id: str, files: tuple):
    """
    Attach documents to a patient's record.
    """
    from dentsync.uploads import attach_documents

    store = _store()
    if store.state.get_patient(patient_id) is None:
        console.print(f"[red]No patient with id {patient_id}[/red]")
        return

    attached = attach_documents(store, patient_id, [Path(f) for f in files])
    for doc in attached:
        console.print(f"[green]✓ {doc.name}[/green] [dim]({doc.size} bytes)[/dim]")
    skipped = len(files) - len(attached)
    if skipped:
        console.print(f"[yellow]{skipped} file(s) could not be read[/yellow]")


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
def logo(image: str):
    """
    Set the clinic logo from an image file.
    """
    from dentsync.uploads import set_clinic_logo

    set_clinic_logo(_store(), Path(image))
    console.print("[green]✓ Logo updated[/green]")


@cli.command()
@click.option("--start", type=str, help="First day (YYYY-MM-DD)")
@click.option("--end", type=str, help="Last day (YYYY-MM-DD)")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Also write the ledger as CSV")
def financials(start: Optional[str], end: Optional[str], csv_path: Optional[str]):
    """
    Show the financial summary and ledger.
    """
    from dentsync.exporters import export_financials_csv
    from dentsync.reports import filter_transactions, monthly_summary, summarize, total_outstanding

    state = _store().state
    transactions = filter_transactions(
        state.transactions, _parse_day(start, "--start"), _parse_day(end, "--end")
    )
    summary = summarize(transactions)

    net_color = "green" if summary.net >= 0 else "red"
    console.print(Panel(
        f"Income: [green]₹{summary.income:.2f}[/green]\n"
        f"Expenses: [red]₹{summary.expense:.2f}[/red]\n"
        f"Net: [{net_color}]₹{summary.net:.2f}[/{net_color}]\n"
        f"Outstanding from patients: [yellow]₹{total_outstanding(state.patients):.2f}[/yellow]",
        title=f"Financials {start} to {end}" if start and end else "Financials",
        border_style="blue",
    ))

    table = Table(title="Last 6 Months")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right")
    table.add_column("Expense", justify="right")
    for month in monthly_summary(state.transactions):
        table.add_row(month.label, f"{month.income:.2f}", f"{month.expense:.2f}")
    console.print(table)

    if transactions:
        ledger = Table(title="Transactions")
        ledger.add_column("Date")
        ledger.add_column("Type")
        ledger.add_column("Category")
        ledger.add_column("Description")
        ledger.add_column("Amount", justify="right")
        for t in transactions:
            ledger.add_row(t.date, t.type.value, t.category, t.description, f"{t.amount:.2f}")
        console.print(ledger)

    if csv_path:
        export_financials_csv(transactions, Path(csv_path))
        console.print(f"[green]✓ Exported to {csv_path}[/green]")


@cli.command()
@click.argument("target_id")
@click.option("--kind", type=click.Choice(["report", "confirmation", "reminder"]), default="report",
              help="Message template to use")
@click.option("--doctor", default="", help="Doctor name (report only)")
@click.option("--visit-date", default=None, help="Visit date (report only, defaults to today)")
@click.option("--sections", type=str, help="Comma-separated report sections")
def message(target_id: str, kind: str, doctor: str, visit_date: Optional[str], sections: Optional[str]):
    """
    Compose a WhatsApp message.

    TARGET_ID is a patient id for reports and an appointment id for
    confirmations and reminders.
    """
    from dentsync.exporters import (
        appointment_confirmation_message,
        appointment_reminder_message,
        parse_sections,
        patient_report_message,
    )

    state = _store().state

    if kind == "report":
        patient = state.get_patient(target_id)
        if patient is None:
            console.print(f"[red]No patient with id {target_id}[/red]")
            return
        try:
            chosen = parse_sections(sections)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--sections")
        text = patient_report_message(
            patient, state, doctor, visit_date or date.today().isoformat(), chosen
        )
    else:
        appointment = state.get_appointment(target_id)
        patient = state.get_patient(appointment.patient_id) if appointment else None
        if patient is None:
            console.print(f"[red]No appointment with id {target_id}[/red]")
            return
        compose = appointment_confirmation_message if kind == "confirmation" else appointment_reminder_message
        text = compose(appointment, patient, state)

    console.print(text, markup=False)


@cli.command()
@click.argument("patient_id")
@click.option("--format", "fmt", type=click.Choice(["json", "markdown"]), required=True,
              help="Format to export to")
@click.option("--sections", type=str, help="Comma-separated report sections (markdown only)")
@click.option("--output", "-o", type=click.Path(), help="Output file path")
def export(patient_id: str, fmt: str, sections: Optional[str], output: Optional[str]):
    """
    Export a patient record.

    Example:

        dentsync export 1a2b3c4d --format markdown -o ./report.md
    """
    from dentsync.exporters import export_json, export_markdown, parse_sections

    state = _store().state
    patient = state.get_patient(patient_id)
    if patient is None:
        console.print(f"[red]No patient with id {patient_id}[/red]")
        return

    if output:
        out_path = Path(output)
    else:
        ext_map = {"json": ".json", "markdown": ".md"}
        out_path = Path.cwd() / f"Patient_Report_{patient.first_name}_{patient.last_name}{ext_map[fmt]}"

    if fmt == "json":
        export_json(patient, out_path)
    else:
        try:
            chosen = parse_sections(sections)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--sections")
        export_markdown(patient, state, chosen, out_path)

    console.print(f"[green]✓ Exported to {out_path}[/green]")


@cli.command()
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
def login(email: str, password: str):
    """
    Sign in to the clinic account.
    """
    from dentsync.auth import AuthError, SupabaseAuthProvider, bind_auth

    try:
        provider = SupabaseAuthProvider.from_config()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return

    store = _store()
    unsubscribe = bind_auth(store, provider)
    try:
        user = provider.sign_in(email, password)
    except AuthError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        return
    finally:
        unsubscribe()

    console.print(Panel(
        f"[bold green]✓ Signed in[/bold green]\n\n"
        f"[bold]{user.label}[/bold]\n"
        f"{user.email or ''}",
        title=store.state.clinic_name,
        border_style="green",
    ))


@cli.command()
def logout():
    """
    Sign out of the clinic account.
    """
    from dentsync.auth import AuthError, SupabaseAuthProvider

    try:
        provider = SupabaseAuthProvider.from_config()
        provider.sign_out()
    except (ValueError, AuthError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return
    console.print("[green]✓ Signed out[/green]")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
