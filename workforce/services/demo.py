"""
Default reference data and the deterministic demo data set.

Demo users log in as ``firstname.surname@<demo domain>`` with the password
``Password123``.
"""
import io
import random
from datetime import date, datetime, time, timedelta, timezone
from typing import AsyncIterator, List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.auth import hash_password
from workforce.checklists import get_checklist_for_category
from workforce.config import get_settings
from workforce.logging_config import get_logger
from workforce.models.inspection import (
    Action, ActionPriority, ActionStatus, InspectionItem, InspectionStatus, ItemStatus,
    VehicleInspection,
)
from workforce.models.message import Message, MessagePriority, MessageRecipient, MessageType, RecipientStatus
from workforce.models.rams import (
    AssignmentStatus, RamsAssignment, RamsDocument, RamsFileType, RamsVisitorSignature,
)
from workforce.models.timesheet import Timesheet, TimesheetEntry, TimesheetStatus
from workforce.models.user import Profile, Role
from workforce.models.vehicle import Vehicle, VehicleCategory
from workforce.services.storage import RAMS_BUCKET, StorageService
from workforce.services.timesheets import calculate_daily_total, week_ending_for

settings = get_settings()
logger = get_logger(__name__)

DEMO_PASSWORD = "Password123"

# 1x1 transparent PNG
PLACEHOLDER_SIGNATURE = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"
    "+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
)

DEFAULT_ROLES = [
    {"name": "admin", "display_name": "Administrator",
     "description": "Full access including user management", "is_manager_admin": True},
    {"name": "manager", "display_name": "Manager",
     "description": "Reviews timesheets, inspections and RAMS", "is_manager_admin": True},
    {"name": "employee", "display_name": "Employee",
     "description": "Completes timesheets and inspections", "is_manager_admin": False},
]

DEFAULT_CATEGORIES = [
    {"name": "HGV", "description": "Heavy goods vehicles and artic combinations"},
    {"name": "Van", "description": "Light commercial vans and pickups"},
    {"name": "Plant", "description": "Plant and site machinery"},
]

DEMO_EMPLOYEES = [
    ("James", "Harrison", "EMP001"), ("Oliver", "Thompson", "EMP002"),
    ("William", "Matthews", "EMP003"), ("George", "Anderson", "EMP004"),
    ("Charlie", "Roberts", "EMP005"), ("Thomas", "Edwards", "EMP006"),
    ("Jack", "Phillips", "EMP007"), ("Harry", "Mitchell", "EMP008"),
    ("Oscar", "Campbell", "EMP009"), ("Jacob", "Turner", "EMP010"),
    ("Noah", "Parker", "EMP011"), ("Arthur", "Collins", "EMP012"),
    ("Henry", "Bennett", "EMP013"), ("Leo", "Hughes", "EMP014"),
]
DEMO_CONTRACTORS = [
    ("Michael", "Davis", "CON001"), ("Daniel", "Wilson", "CON002"),
    ("Samuel", "Moore", "CON003"), ("Joshua", "Taylor", "CON004"),
    ("Alexander", "White", "CON005"),
]
DEMO_MANAGERS = [
    ("Sarah", "Johnson", "MGR001"), ("Emma", "Williams", "MGR002"), ("Sophie", "Brown", "MGR003"),
]
DEMO_ADMINS = [("David", "Clarke", "ADM001")]

DEMO_VEHICLES = [
    ("BD21ABC", "Van", "Van"), ("CD22DEF", "Truck", "HGV"), ("EF23GHI", "Excavator", "Plant"),
    ("GH24JKL", "Van", "Van"), ("IJ25MNO", "Pickup Truck", "Van"), ("KL26PQR", "Dumper", "Plant"),
    ("MN27STU", "Van", "Van"), ("OP28VWX", "Truck", "HGV"), ("QR29YZA", "Loader", "Plant"),
    ("ST30BCD", "Van", "Van"), ("UV31EFG", "Truck", "HGV"), ("WX32HIJ", "Van", "Van"),
    ("YZ33KLM", "Forklift", "Plant"),
]

JOB_NUMBERS = ["J2025-001", "J2025-002", "J2025-003", "J2025-004", "J2025-005", "J2025-006"]

DEMO_RAMS = [
    ("Working at Heights Safety Procedures",
     "Comprehensive safety guidelines for all work at heights including scaffolding, "
     "ladders, and elevated platforms."),
    ("Excavation and Groundworks Risk Assessment",
     "Risk assessment and method statement for excavation work, including shoring, "
     "services, and confined spaces."),
    ("Site Safety Induction and PPE Requirements",
     "Site-specific safety induction covering general safety rules, emergency procedures, "
     "and mandatory PPE."),
]

DEMO_TOOLBOX_TALKS = [
    ("Winter Weather Safety and Cold Working Conditions",
     "Key Points:\n- Dress appropriately for cold conditions\n- Watch for ice and slippery surfaces\n"
     "- Take regular warm-up breaks\n- Report any cold-related health concerns\n"
     "- Ensure vehicles are winter-ready\n\nRemember: Your safety is our priority. If conditions "
     "become unsafe, stop work and notify your supervisor."),
    ("Manual Handling and Lifting Techniques",
     "Key Points:\n- Assess the load before lifting\n- Keep your back straight, bend at the knees\n"
     "- Hold load close to your body\n- Avoid twisting while carrying\n"
     "- Use mechanical aids where possible\n- Ask for help with heavy or awkward loads\n\n"
     "Proper lifting technique prevents injuries."),
]

# Child tables first so foreign keys never dangle mid-reset
DEMO_TABLES = [
    TimesheetEntry, Timesheet, Action, InspectionItem, VehicleInspection,
    RamsVisitorSignature, RamsAssignment, RamsDocument, MessageRecipient, Message,
]


def demo_email(first_name: str, last_name: str) -> str:
    return f"{first_name.lower()}.{last_name.lower()}@{settings.demo_email_domain}"


def rams_document_pdf(title: str, description: str) -> bytes:
    """A one page placeholder method statement."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    pdf.setFont("Helvetica-Bold", 18)
    pdf.drawString(50, height - 50, "RISK ASSESSMENT METHOD STATEMENT")
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawString(50, height - 92, title)
    pdf.setFont("Helvetica", 10)
    pdf.drawString(50, height - 122, description[:110])

    sections = [
        ("1. HAZARDS IDENTIFIED:", ["Manual handling injuries", "Falls from height",
                                    "Slips, trips and falls", "Contact with plant and equipment"]),
        ("2. CONTROL MEASURES:", ["All operatives to wear appropriate PPE",
                                  "Site induction completed for all personnel",
                                  "Equipment inspected before use"]),
        ("3. EMERGENCY PROCEDURES:", ["First aid kit located in site office",
                                      "All incidents to be reported immediately"]),
    ]
    y = height - 162
    for heading, lines in sections:
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawString(50, y, heading)
        y -= 20
        pdf.setFont("Helvetica", 9)
        for line in lines:
            pdf.drawString(60, y, f"- {line}")
            y -= 15
        y -= 20

    pdf.setFont("Helvetica", 8)
    pdf.drawString(50, 50, "This document must be read and understood by all personnel")
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


async def ensure_reference_data(db: AsyncSession) -> None:
    """Insert any missing default roles and vehicle categories."""
    existing_roles = set((await db.execute(select(Role.name))).scalars().all())
    for role in DEFAULT_ROLES:
        if role["name"] not in existing_roles:
            db.add(Role(**role))

    existing_categories = set((await db.execute(select(VehicleCategory.name))).scalars().all())
    for category in DEFAULT_CATEGORIES:
        if category["name"] not in existing_categories:
            db.add(VehicleCategory(**category))
    await db.commit()


async def clear_demo_data(db: AsyncSession, keep_profile_id: Optional[int] = None,
                          storage: Optional[StorageService] = None) -> AsyncIterator[str]:
    """
    Delete all operational rows, every profile except ``keep_profile_id``
    and every role except that profile's role. Yields a label per step.
    """
    for model in DEMO_TABLES:
        yield f"Clearing {model.__tablename__}..."
        await db.execute(delete(model))

    keep_role_id = None
    if keep_profile_id is not None:
        keep_role_id = (await db.execute(
            select(Profile.role_id).where(Profile.id == keep_profile_id)
        )).scalar_one_or_none()

    yield "Deleting demo user profiles..."
    statement = delete(Profile)
    if keep_profile_id is not None:
        statement = statement.where(Profile.id != keep_profile_id)
    await db.execute(statement)

    statement = delete(Role)
    if keep_role_id is not None:
        statement = statement.where(Role.id != keep_role_id)
    await db.execute(statement)

    yield "Deleting vehicles..."
    await db.execute(delete(Vehicle))
    await db.execute(delete(VehicleCategory))
    await db.commit()

    (storage or StorageService()).clear_bucket(RAMS_BUCKET)
    db.expunge_all()


class DemoDataGenerator:
    """
    Builds the demo organisation. The same seed and reference date always
    produce the same rows.
    """

    def __init__(self, db: AsyncSession, seed: int = 2025, today: Optional[date] = None,
                 weeks: int = 4, storage: Optional[StorageService] = None):
        self.db = db
        self.rng = random.Random(seed)
        self.today = today or date.today()
        self.weeks = weeks
        self.storage = storage or StorageService()
        self.employees: List[Profile] = []
        self.managers: List[Profile] = []
        self.admins: List[Profile] = []
        self.vehicles: List[Vehicle] = []
        self.counts = {}

    def _at(self, day: date, hour: int = 9) -> datetime:
        return datetime.combine(day, time(hour, 0), tzinfo=timezone.utc)

    async def run(self) -> AsyncIterator[str]:
        """Create everything, yielding a label before each stage."""
        yield "Creating demo users and roles..."
        await ensure_reference_data(self.db)
        await self.create_users()
        yield "Setting up vehicles..."
        await self.create_vehicles()
        yield "Generating RAMS documents..."
        await self.create_rams()
        yield "Creating toolbox talks..."
        await self.create_toolbox_talks()
        yield f"Generating timesheets ({self.weeks} weeks)..."
        await self.create_timesheets()
        yield "Creating vehicle inspections..."
        await self.create_inspections()
        logger.info(f"Demo data created: {self.counts}")

    async def create_users(self) -> None:
        roles = {r.name: r for r in (await self.db.execute(select(Role))).scalars().all()}
        existing = set((await self.db.execute(select(Profile.email))).scalars().all())
        # One hash for every demo account keeps generation fast
        hashed = hash_password(DEMO_PASSWORD)

        groups = [
            (DEMO_EMPLOYEES + DEMO_CONTRACTORS, "employee", self.employees),
            (DEMO_MANAGERS, "manager", self.managers),
            (DEMO_ADMINS, "admin", self.admins),
        ]
        for people, role_name, bucket in groups:
            for first_name, last_name, employee_id in people:
                email = demo_email(first_name, last_name)
                if email in existing:
                    continue
                profile = Profile(
                    email=email,
                    hashed_password=hashed,
                    full_name=f"{first_name} {last_name}",
                    employee_id=employee_id,
                    role_id=roles[role_name].id,
                    must_change_password=False,
                    annual_holiday_allowance_days=28,
                )
                self.db.add(profile)
                bucket.append(profile)
        await self.db.flush()
        self.counts["users"] = len(self.employees) + len(self.managers) + len(self.admins)

    async def create_vehicles(self) -> None:
        categories = {
            c.name: c for c in (await self.db.execute(select(VehicleCategory))).scalars().all()
        }
        existing = set((await self.db.execute(select(Vehicle.reg_number))).scalars().all())
        for reg_number, vehicle_type, category_name in DEMO_VEHICLES:
            if reg_number in existing:
                continue
            vehicle = Vehicle(
                reg_number=reg_number,
                vehicle_type=vehicle_type,
                category=categories[category_name],
                status="active",
            )
            self.db.add(vehicle)
            self.vehicles.append(vehicle)
        await self.db.flush()
        self.counts["vehicles"] = len(self.vehicles)

    async def create_rams(self) -> None:
        if not self.managers:
            return
        documents = 0
        for index, (title, description) in enumerate(DEMO_RAMS):
            manager = self.managers[index % len(self.managers)]
            content = rams_document_pdf(title, description)
            file_name = f"rams-demo-{index + 1}.pdf"
            document = RamsDocument(
                title=title,
                description=description,
                file_name=file_name,
                file_path=self.storage.save(RAMS_BUCKET, file_name, content),
                file_size=len(content),
                file_type=RamsFileType.PDF,
                uploaded_by=manager.id,
            )
            low = len(self.employees) // 2
            high = max(low, int(len(self.employees) * 0.8))
            assigned = self.employees[:self.rng.randint(low, high)]
            for employee in assigned:
                status = self.rng.choice([AssignmentStatus.PENDING, AssignmentStatus.READ,
                                          AssignmentStatus.READ, AssignmentStatus.SIGNED,
                                          AssignmentStatus.SIGNED])
                assignment = RamsAssignment(
                    employee_id=employee.id,
                    assigned_by=manager.id,
                    assigned_at=self._at(self.today - timedelta(days=28)),
                    status=status,
                )
                if status != AssignmentStatus.PENDING:
                    assignment.read_at = self._at(self.today - timedelta(days=self.rng.randint(5, 25)))
                    assignment.action_taken = self.rng.choice(["downloaded", "opened"])
                if status == AssignmentStatus.SIGNED:
                    assignment.signed_at = assignment.read_at + timedelta(hours=2)
                    assignment.signature_data = PLACEHOLDER_SIGNATURE
                document.assignments.append(assignment)
            self.db.add(document)
            documents += 1
        await self.db.flush()
        self.counts["rams_documents"] = documents

    async def create_toolbox_talks(self) -> None:
        if not self.managers:
            return
        for index, (subject, body) in enumerate(DEMO_TOOLBOX_TALKS):
            message = Message(
                type=MessageType.TOOLBOX_TALK,
                subject=subject,
                body=body,
                priority=MessagePriority.HIGH,
                sender_id=self.managers[index % len(self.managers)].id,
                created_via="web",
            )
            for employee in self.employees:
                status = self.rng.choice([RecipientStatus.PENDING, RecipientStatus.SHOWN,
                                          RecipientStatus.SHOWN, RecipientStatus.SIGNED,
                                          RecipientStatus.SIGNED])
                recipient = MessageRecipient(user_id=employee.id, status=status)
                if status != RecipientStatus.PENDING:
                    recipient.first_shown_at = self._at(self.today - timedelta(days=self.rng.randint(3, 15)))
                if status == RecipientStatus.SIGNED:
                    recipient.signed_at = recipient.first_shown_at + timedelta(minutes=10)
                    recipient.signature_data = PLACEHOLDER_SIGNATURE
                message.recipients.append(recipient)
            self.db.add(message)
        await self.db.flush()
        self.counts["toolbox_talks"] = len(DEMO_TOOLBOX_TALKS)

    def _timesheet_status(self) -> TimesheetStatus:
        roll = self.rng.random()
        if roll < 0.10:
            return TimesheetStatus.DRAFT
        if roll < 0.40:
            return TimesheetStatus.SUBMITTED
        if roll < 0.70:
            return TimesheetStatus.APPROVED
        if roll < 0.75:
            return TimesheetStatus.REJECTED
        return TimesheetStatus.PROCESSED

    async def create_timesheets(self) -> None:
        if not (self.employees and self.managers and self.vehicles):
            return
        created = 0
        current_week = week_ending_for(self.today)
        for week in range(self.weeks):
            week_ending = current_week - timedelta(weeks=week)
            for employee in self.employees:
                status = self._timesheet_status()
                manager = self.rng.choice(self.managers)
                timesheet = Timesheet(
                    user_id=employee.id,
                    reg_number=self.rng.choice(self.vehicles).reg_number,
                    week_ending=week_ending,
                    status=status,
                )
                if status != TimesheetStatus.DRAFT:
                    timesheet.signature_data = PLACEHOLDER_SIGNATURE
                    timesheet.signed_at = timesheet.submitted_at = self._at(week_ending, 17)
                if status in (TimesheetStatus.APPROVED, TimesheetStatus.REJECTED, TimesheetStatus.PROCESSED):
                    timesheet.reviewed_by = manager.id
                    timesheet.reviewed_at = self._at(week_ending + timedelta(days=1))
                if status == TimesheetStatus.REJECTED:
                    timesheet.manager_comments = "Please correct hours for Monday"
                if status == TimesheetStatus.PROCESSED:
                    timesheet.processed_at = self._at(week_ending + timedelta(days=2))

                for day in range(1, 8):
                    weekend = day >= 6
                    did_not_work = weekend and self.rng.random() < 0.7
                    entry = TimesheetEntry(day_of_week=day, did_not_work=did_not_work)
                    if not did_not_work:
                        start_hour = self.rng.randint(6, 8)
                        finish_minutes = self.rng.choice([0, 30])
                        entry.time_started = f"{start_hour:02d}:00"
                        entry.time_finished = f"{start_hour + self.rng.randint(8, 10):02d}:{finish_minutes:02d}"
                        entry.daily_total = calculate_daily_total(entry.time_started, entry.time_finished)
                        entry.working_in_yard = self.rng.random() < 0.15
                        entry.job_number = "YARD" if entry.working_in_yard else self.rng.choice(JOB_NUMBERS)
                    timesheet.entries.append(entry)
                self.db.add(timesheet)
                created += 1
            await self.db.flush()
        self.counts["timesheets"] = created

    async def create_inspections(self) -> None:
        if not (self.employees and self.managers and self.vehicles):
            return
        created = 0
        inspectors = self.employees[:int(len(self.employees) * 0.9)]
        current_week = week_ending_for(self.today)
        for week in range(self.weeks):
            week_ending = current_week - timedelta(weeks=week)
            for employee in inspectors:
                vehicle = self.rng.choice(self.vehicles)
                manager = self.rng.choice(self.managers)
                checklist = get_checklist_for_category(vehicle.template_type)
                defects = set()
                if self.rng.random() < 0.25:
                    defects = {self.rng.randint(1, len(checklist) - 1) for _ in range(self.rng.randint(1, 3))}
                reviewed = week > 0
                inspection = VehicleInspection(
                    vehicle_id=vehicle.id,
                    user_id=employee.id,
                    week_ending=week_ending,
                    mileage=self.rng.randint(50000, 150000),
                    checked_by=employee.full_name,
                    defects_comments="Minor defects noted and logged" if defects else None,
                    action_taken="Reported to workshop" if defects else None,
                    status=InspectionStatus.REVIEWED if reviewed else InspectionStatus.SUBMITTED,
                    signature_data=PLACEHOLDER_SIGNATURE,
                    signed_at=self._at(week_ending, 17),
                    submitted_at=self._at(week_ending, 17),
                    reviewed_by=manager.id if reviewed else None,
                    reviewed_at=self._at(week_ending + timedelta(days=1)) if reviewed else None,
                )
                for number, description in enumerate(checklist, start=1):
                    for day in range(1, 8):
                        defect = number in defects and day == 1
                        inspection.items.append(InspectionItem(
                            item_number=number,
                            day_of_week=day,
                            item_description=description,
                            status=ItemStatus.ATTENTION if defect else ItemStatus.OK,
                            comments="Defect found during inspection" if defect else None,
                        ))
                for number in sorted(defects):
                    inspection.actions.append(Action(
                        title=f"{vehicle.reg_number}: {checklist[number - 1]}",
                        description="Defect found during inspection - requires attention",
                        priority=self.rng.choice([ActionPriority.LOW, ActionPriority.MEDIUM, ActionPriority.HIGH]),
                        status=self.rng.choice([ActionStatus.PENDING, ActionStatus.PENDING, ActionStatus.IN_PROGRESS]),
                        created_by=manager.id,
                    ))
                self.db.add(inspection)
                created += 1
            await self.db.flush()
        self.counts["inspections"] = created
