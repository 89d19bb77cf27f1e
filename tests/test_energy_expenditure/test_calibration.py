import numpy as np
import pytest

from meerkatmap.energy_expenditure import (
    ACTIREST24_CALIBRATION,
    ACTIWAKE_CALIBRATION,
    CalibrationModel,
    kleiber_resting_metabolic_rate,
)


class TestCalibration:
    def test_power(self):
        model = CalibrationModel(slope=2.0, intercept=1.0)

        assert model.power(0) == 1.0
        np.testing.assert_array_equal(model.power(np.array([0.0, 1.0, 2.5])), [1.0, 3.0, 6.0])

    def test_values(self):
        assert ACTIWAKE_CALIBRATION == (0.64118, 6.44339)
        assert ACTIREST24_CALIBRATION == (0.90565, 3.10448)

    def test_unpacking(self):
        slope, intercept = ACTIREST24_CALIBRATION

        assert slope == ACTIREST24_CALIBRATION.slope
        assert intercept == ACTIREST24_CALIBRATION.intercept


class TestKleiber:
    def test_one_kg(self):
        np.testing.assert_almost_equal(kleiber_resting_metabolic_rate(1000), 300.4 * 1000 / 86400)

    def test_scaling(self):
        """The metabolic rate scales with the mass to the power of 0.75."""
        ratio = kleiber_resting_metabolic_rate(16 * 750) / kleiber_resting_metabolic_rate(750)

        np.testing.assert_almost_equal(ratio, 8)

    @pytest.mark.parametrize("mass", (0, -10))
    def test_invalid_mass(self, mass):
        with pytest.raises(ValueError, match="body mass"):
            kleiber_resting_metabolic_rate(mass)
