from flowart.noise.noise import GridNoise
