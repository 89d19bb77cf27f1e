"""Common constants used in the library."""

import numpy as np

#: The default names of the Gyroscope columns in the sensor frame
SF_GYR = ["gyr_x", "gyr_y", "gyr_z"]
#: The default names of the Accelerometer columns in the sensor frame
SF_ACC = ["acc_x", "acc_y", "acc_z"]
#: The default names of all columns in the sensor frame
SF_COLS = [*SF_ACC, *SF_GYR]

#: The default names of the gravity-free Accelerometer columns in the global frame
GF_ACC = ["acc_gf_x", "acc_gf_y", "acc_gf_z"]
#: The default names of the gravity columns in the sensor frame
SF_GRAV = ["grav_x", "grav_y", "grav_z"]
#: The default names of the Velocity columns in the global frame
GF_VEL = ["vel_x", "vel_y", "vel_z"]
#: The default names of the Position columns in the global frame
GF_POS = ["pos_x", "pos_y", "pos_z"]
#: The default names of the Orientation columns in the global frame
GF_ORI = ["q_x", "q_y", "q_z", "q_w"]
#: The global frame axis that span the horizontal plane
GF_HORIZONTAL_AXIS = [0, 1]

#: Gravity in m/s^2
GRAV = 9.81
#: The gravity vector in m/s^2 in the global frame
GRAV_VEC = np.array([0.0, 0.0, GRAV])
GRAV_VEC.flags.writeable = False

#: Seconds in one day
SECONDS_PER_DAY = 24 * 60 * 60
