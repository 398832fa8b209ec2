"""Centre/scale, Yeo-Johnson and PCA as one fitted, reusable transform."""
from __future__ import annotations

import pandas as pd
from sklearn.decomposition import PCA
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import PowerTransformer, StandardScaler


def build_transformer(variance_retained=0.95) -> Pipeline:
    return Pipeline([
        ("scale", StandardScaler()),
        ("power", PowerTransformer(method="yeo-johnson", standardize=True)),
        ("pca", PCA(n_components=variance_retained, svd_solver="full")),
    ])


def fit_transformer(features: pd.DataFrame, variance_retained=0.95) -> Pipeline:
    return build_transformer(variance_retained).fit(features)


def apply_transformer(transformer: Pipeline, features: pd.DataFrame) -> pd.DataFrame:
    """Project ``features`` with an already fitted transformer; never refits."""
    Z = transformer.transform(features)
    cols = [f"PC{i + 1}" for i in range(Z.shape[1])]
    return pd.DataFrame(Z, index=features.index, columns=cols)


def correlation_matrix(features: pd.DataFrame) -> pd.DataFrame:
    return features.corr(method="pearson")
