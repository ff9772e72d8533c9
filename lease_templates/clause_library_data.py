"""Default residential lease clause set.

Installed by ``ClauseLibraryService.seed_default_clauses`` (and the
``seed_lease_clauses`` management command) when the library is empty.

Each entry is:
- name: machine name, unique within the default set
- title: heading used in generated leases
- category: one of ClauseCategory
- content: clause text with {{variable}} placeholders
- summary: one-line description
- requirement: required|optional|conditional
- variables: placeholder names the clause expects
"""
from __future__ import annotations

DEFAULT_LEASE_CLAUSES: list[dict] = [
    {
        "name": "parties",
        "title": "Parties to the Agreement",
        "category": "general",
        "content": 'This Residential Lease Agreement ("Agreement") is entered into as of {{lease_start_date}} by and between {{landlord_name}} ("Landlord") and {{tenant_names}} ("Tenant(s)") for the property located at {{property_address}} ("Premises").',
        "summary": "Identifies the landlord, tenant(s), and property address",
        "requirement": "required",
        "variables": ["lease_start_date", "landlord_name", "tenant_names", "property_address"],
    },
    {
        "name": "lease_term",
        "title": "Lease Term",
        "category": "general",
        "content": "The term of this Lease shall commence on {{lease_start_date}} and shall terminate on {{lease_end_date}}, unless sooner terminated or extended in accordance with the terms of this Agreement.",
        "summary": "Specifies the start and end dates of the lease",
        "requirement": "required",
        "variables": ["lease_start_date", "lease_end_date"],
    },
    {
        "name": "rent_payment",
        "title": "Rent Payment",
        "category": "rent",
        "content": "Tenant agrees to pay Landlord the sum of {{monthly_rent}} per month as rent for the Premises. Rent is due on the {{rent_due_day}} day of each month and shall be paid to Landlord at {{payment_address}} or by electronic payment as directed by Landlord.",
        "summary": "Specifies monthly rent amount and payment terms",
        "requirement": "required",
        "variables": ["monthly_rent", "rent_due_day", "payment_address"],
    },
    {
        "name": "late_fee",
        "title": "Late Fee",
        "category": "rent",
        "content": "If rent is not received by the {{grace_period_days}} day of the month, Tenant shall pay a late fee of {{late_fee_amount}}. This late fee is in addition to the monthly rent and any other charges that may be due.",
        "summary": "Defines late fee terms and grace period",
        "requirement": "optional",
        "variables": ["grace_period_days", "late_fee_amount"],
    },
    {
        "name": "security_deposit",
        "title": "Security Deposit",
        "category": "security_deposit",
        "content": "Upon execution of this Agreement, Tenant shall deposit with Landlord the sum of {{security_deposit_amount}} as a security deposit. This deposit shall be held by Landlord as security for the faithful performance by Tenant of all terms, covenants, and conditions of this Lease.",
        "summary": "Specifies security deposit amount and terms",
        "requirement": "required",
        "variables": ["security_deposit_amount"],
    },
    {
        "name": "maintenance_responsibility",
        "title": "Maintenance and Repairs",
        "category": "maintenance",
        "content": "Landlord shall maintain the Premises in a habitable condition and shall be responsible for repairs to the structure, roof, plumbing, heating, electrical systems, and appliances provided by Landlord. Tenant shall be responsible for keeping the Premises clean and for repairs to damage caused by Tenant or Tenant's guests.",
        "summary": "Defines maintenance responsibilities",
        "requirement": "required",
        "variables": [],
    },
    {
        "name": "utilities",
        "title": "Utilities",
        "category": "utilities",
        "content": "Tenant shall be responsible for payment of the following utilities: {{tenant_utilities}}. Landlord shall be responsible for payment of the following utilities: {{landlord_utilities}}.",
        "summary": "Specifies utility payment responsibilities",
        "requirement": "required",
        "variables": ["tenant_utilities", "landlord_utilities"],
    },
    {
        "name": "pet_policy",
        "title": "Pet Policy",
        "category": "pets",
        "content": "Tenant {{pets_allowed}} keep pets on the Premises. {{pet_restrictions}}",
        "summary": "Defines pet policy and restrictions",
        "requirement": "conditional",
        "variables": ["pets_allowed", "pet_restrictions"],
    },
]
