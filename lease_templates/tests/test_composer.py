"""
Tests for template composition and lifecycle
"""
from django.test import SimpleTestCase

from lease_templates.clause_library import ClauseLibraryService
from lease_templates.composer import TemplateComposerService
from lease_templates.exceptions import ConflictError, NotFound, PreconditionFailed, ValidationError
from lease_templates.generator import LeaseGenerationService
from lease_templates.records import Condition
from lease_templates.storage import InMemoryLeaseStore

from .factories import clause_payload, template_payload, variable


class ComposerTestMixin:
    def setUp(self):
        self.store = InMemoryLeaseStore()
        self.library = ClauseLibraryService(self.store)
        self.composer = TemplateComposerService(self.store)

    def make_template(self, **overrides):
        return self.composer.create_template(template_payload(**overrides))


class CreateTemplateTests(ComposerTestMixin, SimpleTestCase):
    def test_new_template_is_draft_version_one(self):
        template = self.make_template(variables=[variable('monthly_rent', 'currency')])
        self.assertEqual(template.status, 'draft')
        self.assertEqual(template.version, 1)
        self.assertIsNone(template.parent_version_id)
        self.assertEqual(template.metadata.estimated_pages, 5)
        self.assertEqual(template.metadata.required_signatures, 2)
        self.assertEqual([v.name for v in template.variables], ['monthly_rent'])
        self.assertEqual(template.variables[0].type, 'currency')

    def test_missing_jurisdiction_type_is_rejected(self):
        payload = template_payload()
        del payload['jurisdiction_type']
        with self.assertRaises(ValidationError) as ctx:
            self.composer.create_template(payload)
        self.assertEqual(ctx.exception.fields, ['jurisdiction_type'])

    def test_duplicate_variable_names_are_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            self.make_template(variables=[variable('rent'), variable('rent')])
        self.assertEqual(ctx.exception.fields, ['variables'])

    def test_invalid_validation_pattern_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            self.make_template(variables=[variable('unit_code', validation={'pattern': '['})])
        self.assertEqual(ctx.exception.fields, ['variables'])

        template = self.make_template()
        with self.assertRaises(ValidationError):
            self.composer.update_template(template.id, {
                'variables': [variable('unit_code', validation={'pattern': '(unclosed'})],
            })
        self.assertEqual(self.composer.get_template(template.id).variables, [])

    def test_clause_ids_are_bound_in_sequence(self):
        a = self.library.create_clause(clause_payload('parties'))
        b = self.library.create_clause(clause_payload('lease_term'))
        template = self.make_template(clause_ids=[a.id, b.id])
        self.assertEqual([(x.clause_id, x.order) for x in template.clauses], [(a.id, 0), (b.id, 1)])

    def test_clause_ids_are_checked_for_incompatibility(self):
        b = self.library.create_clause(clause_payload('month_to_month'))
        a = self.library.create_clause(clause_payload('fixed_term', incompatible_with=[b.id]))
        with self.assertRaises(ConflictError):
            self.make_template(clause_ids=[b.id, a.id])
        self.assertEqual(self.composer.list_templates(), [])

    def test_update_template(self):
        template = self.make_template()
        updated = self.composer.update_template(template.id, {
            'name': 'Renamed',
            'metadata': {'notarization_required': True},
        })
        self.assertEqual(updated.name, 'Renamed')
        self.assertTrue(updated.metadata.notarization_required)
        self.assertEqual(updated.metadata.estimated_pages, 5)
        self.assertEqual(updated.status, 'draft')

    def test_list_templates_filters(self):
        self.make_template(name='CA apartment')
        self.make_template(name='NY house', jurisdiction='NY', property_type='house')
        self.assertEqual([t.name for t in self.composer.list_templates(jurisdiction='NY')], ['NY house'])
        self.assertEqual([t.name for t in self.composer.list_templates(property_type='apartment')], ['CA apartment'])
        self.assertEqual(self.composer.list_templates(status='active'), [])


class AttachClauseTests(ComposerTestMixin, SimpleTestCase):
    def test_attach_defaults_to_next_order(self):
        template = self.make_template()
        a = self.library.create_clause(clause_payload('parties'))
        b = self.library.create_clause(clause_payload('lease_term'))

        first = self.composer.attach_clause(template.id, a.id)
        second = self.composer.attach_clause(template.id, b.id)

        self.assertEqual(first.order, 0)
        self.assertEqual(second.order, 1)

    def test_bindings_are_sorted_and_ties_keep_insertion_order(self):
        template = self.make_template()
        a = self.library.create_clause(clause_payload('a'))
        b = self.library.create_clause(clause_payload('b'))
        c = self.library.create_clause(clause_payload('c'))

        self.composer.attach_clause(template.id, a.id, order=5)
        self.composer.attach_clause(template.id, b.id, order=1)
        self.composer.attach_clause(template.id, c.id, order=5)

        stored = self.composer.get_template(template.id)
        self.assertEqual([x.clause_id for x in stored.ordered_bindings()], [b.id, a.id, c.id])

    def test_attach_keeps_binding_options(self):
        template = self.make_template()
        clause = self.library.create_clause(clause_payload('pet_policy'))
        binding = self.composer.attach_clause(
            template.id,
            clause.id,
            is_required=True,
            custom_content='Pets allowed: {{has_pets}}',
            conditions=[{'field': 'has_pets', 'operator': 'is_true', 'value': True}],
        )
        self.assertTrue(binding.is_required)
        self.assertEqual(binding.custom_content, 'Pets allowed: {{has_pets}}')
        self.assertEqual(binding.conditions, [Condition(field='has_pets', operator='is_true', value=True)])

    def test_attach_rejects_unknown_operator(self):
        template = self.make_template()
        clause = self.library.create_clause(clause_payload('pet_policy'))
        with self.assertRaises(ValidationError):
            self.composer.attach_clause(
                template.id, clause.id, conditions=[{'field': 'x', 'operator': 'regex', 'value': '.*'}],
            )
        self.assertEqual(self.composer.get_template(template.id).clauses, [])

    def test_attach_unknown_template_or_clause(self):
        template = self.make_template()
        clause = self.library.create_clause(clause_payload('parties'))
        with self.assertRaises(NotFound):
            self.composer.attach_clause('missing', clause.id)
        with self.assertRaises(NotFound):
            self.composer.attach_clause(template.id, 'missing')

    def test_incompatibility_is_checked_from_the_new_clause_only(self):
        """A lists B as incompatible; B lists nothing"""
        b = self.library.create_clause(clause_payload('month_to_month'))
        a = self.library.create_clause(clause_payload('fixed_term', incompatible_with=[b.id]))

        first = self.make_template(name='B then A')
        self.composer.attach_clause(first.id, b.id)
        with self.assertRaises(ConflictError) as ctx:
            self.composer.attach_clause(first.id, a.id)
        self.assertEqual(ctx.exception.extra['clause_id'], a.id)
        self.assertEqual(ctx.exception.extra['conflicting_clause_id'], b.id)
        self.assertEqual(
            ctx.exception.message,
            'Clause "fixed_term" is incompatible with existing clause "month_to_month"',
        )

        second = self.make_template(name='A then B')
        self.composer.attach_clause(second.id, a.id)
        self.composer.attach_clause(second.id, b.id)
        self.assertEqual(self.composer.get_template(second.id).bound_clause_ids(), [a.id, b.id])

    def test_detach_removes_first_binding(self):
        template = self.make_template()
        clause = self.library.create_clause(clause_payload('parties'))
        self.composer.attach_clause(template.id, clause.id, order=3)
        self.composer.attach_clause(template.id, clause.id, order=1)

        updated = self.composer.detach_clause(template.id, clause.id)
        self.assertEqual([b.order for b in updated.clauses], [3])

    def test_detach_unbound_clause(self):
        template = self.make_template()
        with self.assertRaises(NotFound):
            self.composer.detach_clause(template.id, 'missing')


class LifecycleTests(ComposerTestMixin, SimpleTestCase):
    def test_publish_requires_every_required_clause(self):
        parties = self.library.create_clause(clause_payload('parties', requirement='required'))
        rent = self.library.create_clause(clause_payload('rent_payment', requirement='required'))
        self.library.create_clause(clause_payload('pet_policy', requirement='conditional'))
        template = self.make_template(clause_ids=[parties.id])

        with self.assertRaises(PreconditionFailed) as ctx:
            self.composer.publish(template.id)
        self.assertIn('rent_payment', ctx.exception.message)
        self.assertEqual(ctx.exception.extra['missing_clauses'], [
            {'id': rent.id, 'name': 'rent_payment', 'title': 'Rent Payment'},
        ])
        self.assertEqual(self.composer.get_template(template.id).status, 'draft')

        self.composer.attach_clause(template.id, rent.id)
        published = self.composer.publish(template.id)
        self.assertEqual(published.status, 'active')
        self.assertIsNotNone(published.published_at)

    def test_clauses_made_required_after_publish_leave_template_active(self):
        """Required-clause coverage is only checked when publishing"""
        parties = self.library.create_clause(clause_payload('parties', requirement='required'))
        late_fee = self.library.create_clause(clause_payload('late_fee'))
        template = self.make_template(clause_ids=[parties.id])
        self.composer.publish(template.id)

        self.library.update_clause(late_fee.id, {'requirement': 'required'})
        self.library.create_clause(clause_payload('lead_paint_disclosure', requirement='required'))

        stored = self.composer.get_template(template.id)
        self.assertEqual(stored.status, 'active')
        lease = LeaseGenerationService(self.store).generate(template.id, {})
        self.assertEqual([c.clause_id for c in lease.clauses], [parties.id])

    def test_inactive_required_clauses_do_not_block_publish(self):
        clause = self.library.create_clause(clause_payload('old_disclosure', requirement='required'))
        self.library.update_clause(clause.id, {'is_active': False})
        template = self.make_template()
        self.assertEqual(self.composer.publish(template.id).status, 'active')

    def test_archived_templates_are_read_only(self):
        clause = self.library.create_clause(clause_payload('parties'))
        template = self.make_template()
        archived = self.composer.archive(template.id)
        self.assertEqual(archived.status, 'archived')

        with self.assertRaises(PreconditionFailed):
            self.composer.attach_clause(template.id, clause.id)
        with self.assertRaises(PreconditionFailed):
            self.composer.publish(template.id)
        with self.assertRaises(PreconditionFailed):
            self.composer.update_template(template.id, {'name': 'Nope'})
        with self.assertRaises(PreconditionFailed):
            self.composer.archive(template.id)

    def test_clone_starts_new_lineage(self):
        a = self.library.create_clause(clause_payload('parties'))
        b = self.library.create_clause(clause_payload('pet_policy'))
        source = self.make_template(clause_ids=[a.id], variables=[variable('has_pets', 'boolean', required=False)])
        self.composer.attach_clause(
            source.id, b.id, conditions=[{'field': 'has_pets', 'operator': 'is_true', 'value': True}],
        )
        self.composer.publish(source.id)
        source = self.composer.get_template(source.id)

        cloned = self.composer.clone(source.id, created_by_id='user-7')

        self.assertNotEqual(cloned.id, source.id)
        self.assertEqual(cloned.name, 'Standard Residential Lease (Copy)')
        self.assertEqual(cloned.status, 'draft')
        self.assertEqual(cloned.version, 1)
        self.assertEqual(cloned.parent_version_id, source.id)
        self.assertEqual(cloned.created_by_id, 'user-7')
        self.assertEqual(cloned.bound_clause_ids(), source.bound_clause_ids())
        self.assertTrue(set(x.id for x in cloned.clauses).isdisjoint(x.id for x in source.clauses))
        self.assertEqual(cloned.clauses[1].conditions, source.clauses[1].conditions)
        self.assertEqual([v.name for v in cloned.variables], ['has_pets'])

    def test_clone_with_name(self):
        source = self.make_template()
        self.assertEqual(self.composer.clone(source.id, new_name='2025 edition').name, '2025 edition')
