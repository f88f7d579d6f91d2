"""
Entity models for the back-office collections.

The dashboard and the stored documents use camelCase names
(``createdBy``, ``startDate`` …); the models expose snake_case attributes
and dump by alias so records reach the client in the shape it expects.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProjectType(str, Enum):
    CLIENT = "Client"
    INTERNAL = "Internal"
    GOVERNMENT = "Government"


class ProjectStatus(str, Enum):
    PENDING = "Pending"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"


class InvestmentStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    PENDING = "Pending"


class ExpenseCategory(str, Enum):
    """Conventional categories. The stored field is free text."""
    RENT = "Rent"
    UTILITY = "Utility"
    EQUIPMENT = "Equipment"
    SALARY = "Salary"
    MARKETING = "Marketing"
    TRAVEL = "Travel"
    OTHER = "Other"


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class CreatorRef(Record):
    id: str
    name: str
    email: str


class Project(Record):
    id: str
    name: str
    description: Optional[str] = None
    source: str
    type: ProjectType
    budget: Decimal = Field(ge=0)
    start_date: datetime
    end_date: Optional[datetime] = None
    status: ProjectStatus = ProjectStatus.PENDING
    progress: int = Field(default=0, ge=0, le=100)
    assigned_members: List[str] = Field(default_factory=list)
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    creator: Optional[CreatorRef] = None


class Investment(Record):
    id: str
    investment_id: str
    source: str
    amount: Decimal = Field(ge=0)
    date: datetime
    status: InvestmentStatus = InvestmentStatus.ACTIVE
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    creator: Optional[CreatorRef] = None


class Expense(Record):
    id: str
    name: str
    amount: Decimal = Field(ge=0)
    category: str = ExpenseCategory.OTHER.value
    date: datetime
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    creator: Optional[CreatorRef] = None


class User(Record):
    id: str
    name: str
    email: str
    role: UserRole = UserRole.EMPLOYEE
    # hashed; never serialised
    password: Optional[str] = Field(default=None, exclude=True)
    phone: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
