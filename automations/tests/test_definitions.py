"""
Tests for trigger and action definitions.
"""

from django.test import SimpleTestCase

from automations.definitions import (
    ACTION_DEFINITIONS,
    TRIGGER_DEFINITIONS,
    ActionType,
    TriggerType,
    actions_by_category,
    is_known_action,
    is_known_trigger,
    required_config_fields,
    triggers_by_category,
)


class DefinitionsTest(SimpleTestCase):

    def test_every_type_has_a_definition(self):
        self.assertEqual(set(TRIGGER_DEFINITIONS), set(TriggerType))
        self.assertEqual(set(ACTION_DEFINITIONS), set(ActionType))
        self.assertEqual(len(TriggerType.values), 23)
        self.assertEqual(len(ActionType.values), 11)

    def test_known_types(self):
        self.assertTrue(is_known_trigger('donation.created'))
        self.assertTrue(is_known_trigger('schedule.weekly'))
        self.assertFalse(is_known_trigger('donation.refunded'))
        self.assertTrue(is_known_action('send_slack'))
        self.assertFalse(is_known_action('send_fax'))

    def test_required_config_fields(self):
        self.assertEqual(required_config_fields('send_email'), ['to', 'subject'])
        self.assertEqual(required_config_fields('delay'), ['duration', 'unit'])
        self.assertEqual(required_config_fields('unknown'), [])

    def test_triggers_grouped_by_category(self):
        grouped = triggers_by_category()

        self.assertEqual(
            list(grouped),
            ['Donations', 'Volunteers', 'Events', 'Cases', 'Prayer', 'Marketing', 'Schedule', 'Integrations']
        )
        self.assertEqual(sum(len(entries) for entries in grouped.values()), 23)

        donation = grouped['Donations'][0]
        self.assertEqual(donation['type'], 'donation.created')
        self.assertIn('donorEmail', donation['dataFields'])
        self.assertIn('availableFilters', donation)

    def test_actions_grouped_by_category(self):
        grouped = actions_by_category()

        self.assertEqual(sum(len(entries) for entries in grouped.values()), 11)
        communication = [entry['type'] for entry in grouped['Communication']]
        self.assertEqual(communication, ['send_email', 'send_sms', 'send_slack', 'send_push_notification'])
        self.assertIn('configFields', grouped['Flow Control'][0])
