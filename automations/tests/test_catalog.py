"""
Unit tests for the automation template catalog.
"""

from django.test import SimpleTestCase

from automations.catalog import (
    Template,
    TemplateCatalog,
    TemplateNotFound,
    default_catalog,
)
from automations.library import TEMPLATE_LIBRARY


def make_template(template_id, category, popularity, steps=None):
    return {
        'id': template_id,
        'name': template_id.replace('_', ' ').title(),
        'description': f'{template_id} description',
        'category': category,
        'popularity': popularity,
        'trigger': {'type': 'donation.created'},
        'steps': steps if steps is not None else [
            {
                'id': 'step1',
                'action': {'type': 'send_email', 'config': {'to': '{{donorEmail}}'}},
            },
        ],
    }


class TemplateCatalogListTest(SimpleTestCase):
    """Test grouping and ordering of the template library."""

    def setUp(self):
        self.result = default_catalog.list_templates()

    def test_categories_in_first_appearance_order(self):
        categories = [group['category'] for group in self.result['categories']]

        self.assertEqual(
            categories,
            ['Donations', 'Volunteers', 'Prayer', 'Cases', 'Events', 'Marketing']
        )

    def test_each_category_appears_once(self):
        categories = [group['category'] for group in self.result['categories']]

        self.assertEqual(len(categories), len(set(categories)))

    def test_templates_sorted_by_popularity_within_category(self):
        for group in self.result['categories']:
            popularity = [template.popularity for template in group['templates']]
            self.assertEqual(popularity, sorted(popularity, reverse=True), group['category'])

    def test_donation_templates_order(self):
        donations = self.result['categories'][0]['templates']

        self.assertEqual(
            [template.id for template in donations],
            [
                'welcome_new_donor',
                'recurring_donation_setup',
                'monthly_donor_impact',
                'recurring_donation_cancelled',
                'failed_payment_notification',
            ]
        )

    def test_total_count_matches_groups(self):
        self.assertEqual(
            self.result['totalCount'],
            sum(len(group['templates']) for group in self.result['categories'])
        )
        self.assertEqual(self.result['totalCount'], 15)

    def test_flattened_groups_reproduce_source(self):
        flattened = [
            template.id
            for group in self.result['categories']
            for template in group['templates']
        ]

        self.assertEqual(len(flattened), len(set(flattened)))
        self.assertEqual(set(flattened), {entry['id'] for entry in TEMPLATE_LIBRARY})

    def test_listing_is_idempotent(self):
        self.assertEqual(default_catalog.list_templates(), self.result)

    def test_empty_catalog(self):
        result = TemplateCatalog([]).list_templates()

        self.assertEqual(result, {'categories': [], 'totalCount': 0})

    def test_ties_keep_source_order(self):
        catalog = TemplateCatalog.from_dicts([
            make_template('first', 'Events', 50),
            make_template('second', 'Events', 50),
            make_template('third', 'Events', 70),
        ])

        templates = catalog.list_templates()['categories'][0]['templates']

        self.assertEqual([t.id for t in templates], ['third', 'first', 'second'])

    def test_template_without_steps_is_kept(self):
        catalog = TemplateCatalog.from_dicts([make_template('empty', 'Events', 10, steps=[])])

        result = catalog.list_templates()

        self.assertEqual(result['totalCount'], 1)
        self.assertEqual(result['categories'][0]['templates'][0].steps, [])

    def test_duplicate_ids_rejected(self):
        with self.assertRaises(ValueError):
            TemplateCatalog.from_dicts([
                make_template('dup', 'Events', 10),
                make_template('dup', 'Cases', 20),
            ])


class TemplateCatalogLookupTest(SimpleTestCase):
    """Test template lookup and instantiation."""

    def test_get_template(self):
        template = default_catalog.get('urgent_case_alert')

        self.assertIsInstance(template, Template)
        self.assertEqual(template.trigger.type, 'case.created')
        self.assertEqual(template.trigger.filters, {'priority': 'urgent'})

    def test_get_unknown_template(self):
        with self.assertRaises(TemplateNotFound):
            default_catalog.get('does_not_exist')

    def test_to_dict_round_trips_source(self):
        source = next(entry for entry in TEMPLATE_LIBRARY if entry['id'] == 'volunteer_shift_reminder_24h')

        self.assertEqual(default_catalog.get(source['id']).to_dict(), source)

    def test_unknown_types_pass_through(self):
        catalog = TemplateCatalog.from_dicts([{
            'id': 'custom',
            'name': 'Custom',
            'category': 'Other',
            'trigger': {'type': 'crm.contact_merged'},
            'steps': [{'id': 's1', 'action': {'type': 'fax', 'config': {}}}],
        }])

        template = catalog.get('custom')

        self.assertIsNone(template.trigger.kind)
        self.assertIsNone(template.steps[0].action.kind)
        self.assertEqual(template.to_dict()['trigger'], {'type': 'crm.contact_merged'})

    def test_instantiate_builds_automation_payload(self):
        payload = default_catalog.instantiate('welcome_new_donor')

        self.assertEqual(payload['name'], 'Welcome New Donor')
        self.assertEqual(payload['templateId'], 'welcome_new_donor')
        self.assertTrue(payload['isActive'])
        self.assertEqual(payload['trigger'], {'type': 'donation.created'})
        self.assertEqual([step['id'] for step in payload['steps']], ['step1', 'step2', 'step3'])

    def test_instantiate_overrides(self):
        payload = default_catalog.instantiate(
            'welcome_new_donor',
            {'name': 'First Gift Thanks', 'isActive': False},
        )

        self.assertEqual(payload['name'], 'First Gift Thanks')
        self.assertFalse(payload['isActive'])

    def test_instantiate_does_not_share_config(self):
        payload = default_catalog.instantiate('welcome_new_donor')
        payload['steps'][0]['action']['config']['subject'] = 'changed'

        template = default_catalog.get('welcome_new_donor')

        self.assertNotEqual(template.steps[0].action.config['subject'], 'changed')
