"""
Renewable investment calculator web API
Flask backend exposing the greencalc engine as JSON endpoints
"""

import logging
import os

from flask import Flask, Response, jsonify, request

from greencalc.config import EngineSettings, configure_logging
from greencalc.engine import calculate
from greencalc.energy.weather import StaticForecastProvider, WeatherObservation, adjustment_factors
from greencalc.errors import ConfigurationError, ValidationError
from greencalc.economics import lcoe_table
from greencalc.exports import summary_csv, yearly_csv
from greencalc.goals import suggest_system_size, suggested_configuration
from greencalc.sources import SOURCE_TYPES, catalogue_dict
from greencalc.validation import DEFAULT_VALUES, FINANCIAL_FIELDS, impute, impute_system, require_record, validate

logger = logging.getLogger(__name__)


def _payload():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def _optional_float(value):
    if value in (None, ''):
        return None
    return float(value)


def _observation(data):
    if not isinstance(data, dict):
        raise ValidationError('Weather observation must be an object')
    try:
        return WeatherObservation(
            solar_irradiance_w_m2=float(data.get('solar_irradiance_w_m2', 0.0)),
            cloud_cover_pct=float(data.get('cloud_cover_pct', 0.0)),
            wind_speed_mps=float(data.get('wind_speed_mps', 0.0)),
            water_flow_m3s=_optional_float(data.get('water_flow_m3s')),
            wave_height_m=_optional_float(data.get('wave_height_m')),
        )
    except (TypeError, ValueError):
        raise ValidationError('Weather observation fields must be numbers')


def _run(payload, settings):
    provider = None
    if payload.get('weather'):
        provider = StaticForecastProvider(adjustment_factors(_observation(payload['weather'])))
    return calculate(
        payload.get('system'),
        payload.get('financial'),
        provider=provider,
        weather_factors=payload.get('weather_factors'),
        settings=settings,
    )


def create_app(settings=None):
    settings = settings or EngineSettings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.environ.get('GREENCALC_SECRET_KEY', 'greencalc-secret-key')
    app.config['ENGINE_SETTINGS'] = settings

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        logger.info('Rejected request: %s', '; '.join(exc.errors))
        return jsonify({'error': str(exc), 'errors': exc.errors}), 400

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(exc):
        return jsonify({'error': str(exc)}), 400

    @app.route('/api/catalogue')
    def api_catalogue():
        """Default source catalogue and site."""
        return jsonify(catalogue_dict())

    @app.route('/api/defaults')
    def api_defaults():
        """Values used when an input field is left empty."""
        return jsonify(DEFAULT_VALUES)

    @app.route('/api/validate', methods=['POST'])
    def api_validate():
        """Validate system + financial input without calculating anything."""
        payload = _payload()
        system, system_flags = impute_system(require_record('system', payload.get('system')))
        financial, financial_flags = impute(require_record('financial', payload.get('financial')), FINANCIAL_FIELDS)
        system_report = validate(system, settings)
        financial_report = validate(financial, settings)
        return jsonify({
            'is_valid': system_report.is_valid and financial_report.is_valid,
            'system': system_report.to_dict(),
            'financial': financial_report.to_dict(),
            'missing_data_flags': system_flags + financial_flags,
        })

    @app.route('/api/calculate', methods=['POST'])
    def api_calculate():
        """Full projection: metrics, energy, carbon and price series."""
        result = _run(_payload(), settings)
        return jsonify(result.to_dict())

    @app.route('/api/export/yearly.csv', methods=['POST'])
    def api_export_yearly():
        result = _run(_payload(), settings)
        return Response(
            yearly_csv(result),
            mimetype='text/csv',
            headers={'Content-Disposition': 'attachment; filename=yearly.csv'},
        )

    @app.route('/api/export/summary.csv', methods=['POST'])
    def api_export_summary():
        result = _run(_payload(), settings)
        return Response(
            summary_csv(result),
            mimetype='text/csv',
            headers={'Content-Disposition': 'attachment; filename=summary.csv'},
        )

    @app.route('/api/lcoe', methods=['POST'])
    def api_lcoe():
        """Lifetime cost breakdown behind the LCOE figure."""
        result = _run(_payload(), settings)
        return jsonify(lcoe_table(result.system, result.energy_generation.yearly_series))

    @app.route('/api/goals', methods=['POST'])
    def api_goals():
        """Suggest a system size for a daily/monthly/yearly energy or carbon goal."""
        payload = _payload()
        try:
            value = float(payload.get('value'))
            factor = float(payload.get('grid_emission_factor', 0.95))
            hours = float(payload.get('daily_production_hours', 5.0))
        except (TypeError, ValueError):
            raise ValidationError('value, grid_emission_factor and daily_production_hours must be numbers')
        source_type = payload.get('source_type', 'solar')
        if source_type not in SOURCE_TYPES:
            raise ValidationError(f'Unknown source_type: {source_type!r}')
        suggestion = suggest_system_size(payload.get('metric', 'daily'), value, factor, hours)
        config = suggested_configuration(suggestion, source_type)
        return jsonify({
            'suggestion': suggestion.to_dict(),
            'system': config.to_dict(),
        })

    @app.route('/api/weather-factors', methods=['POST'])
    def api_weather_factors():
        """Production multipliers for one weather observation."""
        return jsonify(adjustment_factors(_observation(_payload())))

    return app


if __name__ == '__main__':
    create_app().run(debug=True, host='0.0.0.0', port=5000)
