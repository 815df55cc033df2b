"""Pydantic schemas for the HouseDirect API."""

from housedirect.schemas.base import *
from housedirect.schemas.verification import *
from housedirect.schemas.report import *
from housedirect.schemas.lead import *
from housedirect.schemas.user import *
from housedirect.schemas.message import *
