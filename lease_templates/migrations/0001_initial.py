import django.core.serializers.json
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.db import migrations, models


CATEGORY_CHOICES = [
    ('general', 'General'),
    ('rent', 'Rent'),
    ('security_deposit', 'Security Deposit'),
    ('maintenance', 'Maintenance'),
    ('utilities', 'Utilities'),
    ('pets', 'Pets'),
    ('parking', 'Parking'),
    ('termination', 'Termination'),
    ('renewal', 'Renewal'),
    ('rules', 'Rules'),
    ('disclosure', 'Disclosure'),
    ('compliance', 'Compliance'),
    ('custom', 'Custom'),
]

JURISDICTION_TYPE_CHOICES = [
    ('federal', 'Federal'),
    ('state', 'State'),
    ('city', 'City'),
    ('county', 'County'),
]

REQUIREMENT_CHOICES = [
    ('required', 'Required'),
    ('optional', 'Optional'),
    ('conditional', 'Conditional'),
]

TEMPLATE_STATUS_CHOICES = [
    ('draft', 'Draft'),
    ('active', 'Active'),
    ('archived', 'Archived'),
]

LEASE_STATUS_CHOICES = [
    ('draft', 'Draft'),
    ('pending_review', 'Pending Review'),
    ('pending_signature', 'Pending Signature'),
    ('signed', 'Signed'),
    ('expired', 'Expired'),
    ('terminated', 'Terminated'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='LeaseClause',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Machine name (e.g. rent_payment)', max_length=255)),
                ('title', models.CharField(help_text='Heading used in generated leases', max_length=255)),
                ('category', models.CharField(choices=CATEGORY_CHOICES, max_length=32)),
                ('content', models.TextField(help_text='Clause text with {{variable}} placeholders')),
                ('summary', models.TextField(blank=True, null=True)),
                ('jurisdiction', models.CharField(blank=True, help_text='Null means universal', max_length=100, null=True)),
                ('jurisdiction_type', models.CharField(blank=True, choices=JURISDICTION_TYPE_CHOICES, max_length=20, null=True)),
                ('requirement', models.CharField(choices=REQUIREMENT_CHOICES, default='optional', max_length=20)),
                ('variables', models.JSONField(default=list, help_text='Declared placeholder names')),
                ('dependencies', models.JSONField(default=list, help_text='Clause IDs expected alongside this one')),
                ('incompatible_with', models.JSONField(default=list, help_text='Clause IDs that must not be bound with this one')),
                ('effective_date', models.DateTimeField(blank=True, null=True)),
                ('expiry_date', models.DateTimeField(blank=True, null=True)),
                ('legal_reference', models.CharField(blank=True, max_length=255, null=True)),
                ('version', models.IntegerField(default=1, help_text='Content version number')),
                ('is_active', models.BooleanField(default=True)),
                ('revision', models.IntegerField(default=1, help_text='Optimistic concurrency counter')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'lease_clauses',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['category'], name='lease_clause_category_idx'),
                    models.Index(fields=['requirement', 'is_active'], name='lease_clause_req_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LeaseTemplate',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, null=True)),
                ('property_type', models.CharField(blank=True, default='', max_length=100)),
                ('jurisdiction', models.CharField(max_length=100)),
                ('jurisdiction_type', models.CharField(blank=True, choices=JURISDICTION_TYPE_CHOICES, max_length=20, null=True)),
                ('status', models.CharField(choices=TEMPLATE_STATUS_CHOICES, default='draft', max_length=20)),
                ('version', models.IntegerField(default=1)),
                ('parent_version_id', models.UUIDField(blank=True, help_text='Template this one was cloned from', null=True)),
                ('variables', models.JSONField(default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('metadata', models.JSONField(default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('created_by_id', models.CharField(blank=True, max_length=64, null=True)),
                ('revision', models.IntegerField(default=1, help_text='Optimistic concurrency counter')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('published_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'db_table': 'lease_templates',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['jurisdiction', 'status'], name='lease_tmpl_juris_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LeaseTemplateClause',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('order', models.IntegerField(default=0)),
                ('position', models.IntegerField(default=0, help_text='Insertion sequence, breaks ties on order')),
                ('is_required', models.BooleanField(default=False)),
                ('custom_content', models.TextField(blank=True, null=True)),
                ('conditions', models.JSONField(default=list)),
                ('clause', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='template_bindings', to='lease_templates.leaseclause')),
                ('template', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='template_clauses', to='lease_templates.leasetemplate')),
            ],
            options={
                'db_table': 'lease_template_clauses',
                'ordering': ['position'],
                'indexes': [
                    models.Index(fields=['template', 'order'], name='lease_binding_tmpl_order_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GeneratedLease',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('template_version', models.IntegerField(help_text='Template version at generation time')),
                ('property_id', models.CharField(blank=True, max_length=64, null=True)),
                ('unit_id', models.CharField(blank=True, max_length=64, null=True)),
                ('landlord_id', models.CharField(blank=True, max_length=64, null=True)),
                ('tenant_ids', models.JSONField(default=list)),
                ('variables', models.JSONField(default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('content', models.TextField()),
                ('clauses', models.JSONField(default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('status', models.CharField(choices=LEASE_STATUS_CHOICES, default='draft', max_length=20)),
                ('revision', models.IntegerField(default=1)),
                ('generated_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('template', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='generated_leases', to='lease_templates.leasetemplate')),
            ],
            options={
                'db_table': 'generated_leases',
                'ordering': ['generated_at'],
                'indexes': [
                    models.Index(fields=['template', 'status'], name='gen_lease_tmpl_status_idx'),
                    models.Index(fields=['property_id'], name='gen_lease_property_idx'),
                ],
            },
        ),
    ]
