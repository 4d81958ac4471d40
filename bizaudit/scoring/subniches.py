"""
Verticals and Sub-Verticals

Two top-level verticals, each with a registry of sub-verticals. Home
services sub-verticals collapse into three operational groups; real estate
sub-verticals each stand alone as their own group.

Sub-verticals swap the option lists a questionnaire shows (CRMs, tools,
lead sources, KPIs). They never change how answers are scored.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Niche(Enum):
    """Top-level business vertical."""
    HOME_SERVICES = "home_services"
    REAL_ESTATE = "real_estate"

    @property
    def label(self) -> str:
        return "Home Services" if self is Niche.HOME_SERVICES else "Real Estate"

    @classmethod
    def parse(cls, value) -> Optional["Niche"]:
        """Parse a niche value, returning None when unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class SubNicheGroup(Enum):
    """Operational group used for option lists and weight overrides."""
    REACTIVE = "reactive"
    RECURRING = "recurring"
    PROJECT_BASED = "project_based"
    RESIDENTIAL_SALES = "residential_sales"
    COMMERCIAL = "commercial"
    PROPERTY_MANAGEMENT = "property_management"
    NEW_CONSTRUCTION = "new_construction"
    LUXURY_RESORT = "luxury_resort"


@dataclass(frozen=True)
class SubNicheInfo:
    """Display metadata for one sub-vertical."""
    id: str
    label: str
    niche: Niche
    group: SubNicheGroup


@dataclass(frozen=True)
class SubNicheOptions:
    """Option lists shown for a sub-vertical group."""
    crms: Tuple[str, ...]
    tools_extra: Tuple[str, ...] = field(default_factory=tuple)
    lead_sources: Tuple[str, ...] = field(default_factory=tuple)
    kpis: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "crms": list(self.crms),
            "toolsExtra": list(self.tools_extra),
            "leadSources": list(self.lead_sources),
            "kpis": list(self.kpis),
        }


HS = Niche.HOME_SERVICES
RE = Niche.REAL_ESTATE
G = SubNicheGroup

SUB_NICHE_REGISTRY: Tuple[SubNicheInfo, ...] = (
    # Home services: reactive
    SubNicheInfo("hvac", "HVAC", HS, G.REACTIVE),
    SubNicheInfo("plumbing", "Plumbing", HS, G.REACTIVE),
    SubNicheInfo("electrical", "Electrical", HS, G.REACTIVE),
    SubNicheInfo("garage_doors", "Garage Doors", HS, G.REACTIVE),
    # Home services: recurring
    SubNicheInfo("pest_control", "Pest Control", HS, G.RECURRING),
    SubNicheInfo("landscaping", "Landscaping", HS, G.RECURRING),
    SubNicheInfo("cleaning", "Cleaning", HS, G.RECURRING),
    # Home services: project-based
    SubNicheInfo("roofing", "Roofing", HS, G.PROJECT_BASED),
    SubNicheInfo("painting", "Painting", HS, G.PROJECT_BASED),
    SubNicheInfo("general_contracting", "General Contracting", HS, G.PROJECT_BASED),
    SubNicheInfo("construction", "Construction", HS, G.PROJECT_BASED),
    SubNicheInfo("interior_design", "Interior Design", HS, G.PROJECT_BASED),
    # Real estate
    SubNicheInfo("residential_sales", "Residential Sales", RE, G.RESIDENTIAL_SALES),
    SubNicheInfo("commercial", "Commercial / Office", RE, G.COMMERCIAL),
    SubNicheInfo("property_management", "Property Management", RE, G.PROPERTY_MANAGEMENT),
    SubNicheInfo("new_construction", "New Construction", RE, G.NEW_CONSTRUCTION),
    SubNicheInfo("luxury_resort", "Luxury / Resort", RE, G.LUXURY_RESORT),
)

_BY_ID: Dict[str, SubNicheInfo] = {info.id: info for info in SUB_NICHE_REGISTRY}

NO_KPIS = "We don't track any KPIs"

SUB_NICHE_OPTIONS: Dict[SubNicheGroup, SubNicheOptions] = {
    G.REACTIVE: SubNicheOptions(
        crms=(
            "ServiceTitan", "Housecall Pro", "Jobber", "FieldEdge",
            "Successware", "ServiceM8", "No CRM/Software", "Other",
        ),
        lead_sources=(
            "Google Search/SEO", "Google Ads (PPC)", "Google Local Services Ads",
            "Facebook/Instagram Ads", "Nextdoor", "Yelp", "Angi/HomeAdvisor",
            "Emergency Call-Ins", "Home Warranty Company Referrals",
            "Word of Mouth/Referrals", "Truck Wraps/Yard Signs",
        ),
        kpis=(
            "Average Ticket/Job Value", "First-Time Fix Rate",
            "Callback/Redo Rate", "Revenue Per Technician",
            "Lead-to-Booked Rate", "Membership/Maintenance Plan Count",
            "Customer Satisfaction Score", "Emergency Call Response Time",
            "Profit Margins Per Job Type", NO_KPIS,
        ),
    ),
    G.RECURRING: SubNicheOptions(
        crms=(
            "Jobber", "Housecall Pro", "GorillaDesk", "ZenMaid",
            "Pocomos", "Lawn Buddy", "No CRM/Software", "Other",
        ),
        tools_extra=(
            "Route Optimization Software", "Service Agreement Management Platform",
            "Recurring Payment/Subscription Processor",
        ),
        lead_sources=(
            "Google Search/SEO", "Google Ads (PPC)", "Nextdoor", "Yelp",
            "Thumbtack", "Angi/HomeAdvisor", "Facebook/Instagram Ads",
            "Door-to-Door/Yard Signs", "Direct Mail/Flyers",
            "HOA Partnerships", "Seasonal Campaigns",
            "Word of Mouth/Referrals",
        ),
        kpis=(
            "Service Agreement Retention Rate", "Customer Churn Rate",
            "Revenue Per Route/Crew", "Monthly Recurring Revenue (MRR)",
            "Average Service Agreement Value", "Customer Acquisition Cost",
            "On-Time Completion Rate", "Chemical/Material Cost Per Job",
            NO_KPIS,
        ),
    ),
    G.PROJECT_BASED: SubNicheOptions(
        crms=(
            "Buildertrend", "JobTread", "Procore", "CoConstruct",
            "Houzz Pro", "Jobber", "No CRM/Software", "Other",
        ),
        tools_extra=(
            "BIM/CAD Software (AutoCAD, Revit, SketchUp)",
            "Takeoff/Estimating Software (PlanSwift, Bluebeam)",
            "3D Rendering Tools (Enscape, Lumion)",
            "FF&E Specification Software (Studio Designer, Programa)",
        ),
        lead_sources=(
            "Google Search/SEO", "Google Ads (PPC)", "Houzz",
            "Angi/HomeAdvisor", "Facebook/Instagram Ads",
            "Storm Chasing/Door-to-Door Canvassing",
            "Architect/Engineer Partnerships", "Real Estate Agent Referrals",
            "Builder/Developer Referrals", "Instagram/Pinterest",
            "Word of Mouth/Referrals",
        ),
        kpis=(
            "Average Job/Project Value", "Estimate Close Rate",
            "Gross Margin Per Project", "Budget Adherence (CPI)",
            "Schedule Performance (SPI)", "Labor Productivity Rate",
            "Callback/Warranty Claim Rate", "Project Backlog Value",
            "Billable Hours Ratio", NO_KPIS,
        ),
    ),
    G.RESIDENTIAL_SALES: SubNicheOptions(
        crms=(
            "Follow Up Boss", "KVCore/Inside Real Estate", "Lofty (formerly Chime)",
            "Sierra Interactive", "LionDesk", "Wise Agent", "HubSpot",
            "Salesforce", "No CRM", "Other",
        ),
        lead_sources=(
            "Zillow/Realtor.com", "Google Ads (PPC)", "Facebook/Instagram Ads",
            "Open Houses", "Sphere of Influence/Referrals", "Past Client Referrals",
            "Agent Website/IDX", "YouTube/Video",
            "Door Knocking/Cold Calling", "Expired/FSBO Prospecting",
            "Relocation Companies", "Builder/Developer Partnerships",
        ),
        kpis=(
            "Leads Generated Per Agent", "Appointments Set Per Agent",
            "Conversion Rate (Lead to Client)", "Average Days to Close",
            "Cost Per Lead by Source", "GCI Per Agent",
            "Client Satisfaction Score", "Average List-to-Sale Price Ratio",
            NO_KPIS,
        ),
    ),
    G.COMMERCIAL: SubNicheOptions(
        crms=("Apto", "Buildout", "REThink CRM", "Salesforce", "HubSpot", "No CRM", "Other"),
        lead_sources=(
            "CoStar/LoopNet Leads", "LinkedIn Outreach/Prospecting",
            "Commercial Broker Referral Network", "Cold Calling/Direct Prospecting",
            "Trade Association Networks", "RFP/Tender Response",
            "Existing Tenant Expansion/Upsell",
        ),
        kpis=(
            "Deals Closed Per Quarter", "Total Square Footage Leased",
            "Average Lease Value/Commission", "Pipeline Value",
            "Average Deal Cycle Length", "Commission Per Deal",
            "Tenant Retention Rate", "Prospecting Activity Per Broker",
            NO_KPIS,
        ),
    ),
    G.PROPERTY_MANAGEMENT: SubNicheOptions(
        crms=(
            "Buildium", "AppFolio", "Propertyware", "Rent Manager",
            "Rentec Direct", "TenantCloud", "No CRM/Software", "Other",
        ),
        lead_sources=(
            "Referrals from Sales Agents", "Direct Outreach to Property Owners",
            "Zillow Rental Manager", "Apartments.com/Rent.com Listings",
            "LinkedIn (Commercial PM)", "Facebook Property Groups",
            "Past Landlord Relationships",
        ),
        kpis=(
            "Occupancy Rate", "Average Days to Re-Lease",
            "Rent Collection Rate", "Maintenance Request Resolution Time",
            "Lease Renewal Rate", "Units Under Management Growth",
            "Net Operating Income (NOI) Per Property", "Owner Retention/Churn Rate",
            NO_KPIS,
        ),
    ),
    G.NEW_CONSTRUCTION: SubNicheOptions(
        crms=("Lasso CRM", "Buildertrend", "Zoho CRM", "Salesforce", "HubSpot", "No CRM", "Other"),
        lead_sources=(
            "Presale Reservation Lists", "Builder/Developer Referral Program",
            "Real Estate Broker Co-Op Network", "Property Exhibitions/Home Shows",
            "Facebook/Instagram Ads", "Google Ads (PPC)",
            "Email Database Campaigns", "Model Home Walk-Ins",
        ),
        kpis=(
            "Units Sold Per Month", "Presale Reservation Conversion Rate",
            "Average Time from Reservation to Contract",
            "Price Per SqFt vs Market Benchmark", "Co-Op Broker Deal Percentage",
            "Marketing Cost Per Unit Sold", "Cancellation/Refund Rate",
            NO_KPIS,
        ),
    ),
    G.LUXURY_RESORT: SubNicheOptions(
        crms=("Salesforce", "Follow Up Boss", "LionDesk", "Top Producer", "Contactually", "No CRM", "Other"),
        lead_sources=(
            "Referrals from Existing Luxury Clients",
            "International Property Portals", "Luxury Network Partnerships",
            "Instagram/Targeted Social Media",
            "Wealth Manager/Financial Advisor Partnerships",
            "Press/Editorial Features", "Private Client Events",
        ),
        kpis=(
            "Average Transaction Value", "International vs Domestic Buyer Ratio",
            "Time on Market for Luxury Listings", "Close Rate from Qualified Showings",
            "Referral/Repeat Client Rate", "Average Commission Per Transaction",
            "Qualified Buyer Introductions Per Month",
            NO_KPIS,
        ),
    ),
}


def get_sub_niche(sub_niche_id: Optional[str]) -> Optional[SubNicheInfo]:
    """Look up a sub-vertical by id. Unknown or empty ids return None."""
    if not sub_niche_id:
        return None
    return _BY_ID.get(sub_niche_id)


def get_sub_niche_group(sub_niche_id: Optional[str]) -> Optional[SubNicheGroup]:
    info = get_sub_niche(sub_niche_id)
    return info.group if info else None


def get_sub_niche_label(sub_niche_id: Optional[str]) -> Optional[str]:
    info = get_sub_niche(sub_niche_id)
    return info.label if info else None


def get_sub_niches_for_niche(niche: Niche) -> List[SubNicheInfo]:
    """Registry entries belonging to one vertical, in registry order."""
    return [info for info in SUB_NICHE_REGISTRY if info.niche is niche]


def get_sub_niche_options(sub_niche_id: str) -> Optional[SubNicheOptions]:
    group = get_sub_niche_group(sub_niche_id)
    return SUB_NICHE_OPTIONS.get(group) if group else None
